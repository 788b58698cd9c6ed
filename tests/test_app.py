import io

import pytest

from app import app
from fabrica_cnab import arquivo_com_detalhes

DETALHES = [
    {"nosso_numero": "000000101", "ocorrencia": "02"},
    {"nosso_numero": "000000102", "ocorrencia": "06", "valor_pago": 15000},
    {"nosso_numero": "000000103", "ocorrencia": "09"},
]


@pytest.fixture
def client(repositorio):
    app.config["TESTING"] = True
    app.config["REPOSITORIO"] = repositorio
    with app.test_client() as client:
        yield client
    app.config["REPOSITORIO"] = None


def _enviar(client, conteudo, nome="retorno.ret"):
    dados = {"arquivo": (io.BytesIO(conteudo.encode("latin-1")), nome)}
    return client.post("/retornos", data=dados, content_type="multipart/form-data")


def test_processa_arquivo(client, repositorio):
    resposta = _enviar(client, arquivo_com_detalhes(DETALHES))

    assert resposta.status_code == 200
    dados = resposta.get_json()
    assert dados["aplicados"] == 3
    assert dados["erros"] == []
    assert dados["erro_fatal"] is None
    assert repositorio.buscar_por_nosso_numero("000000102").status.value == "pago"


def test_erros_de_linha_voltam_com_200(client):
    detalhes = DETALHES + [{"nosso_numero": "000000999", "ocorrencia": "02"}]
    resposta = _enviar(client, arquivo_com_detalhes(detalhes))

    assert resposta.status_code == 200
    erros = resposta.get_json()["erros"]
    assert erros[0]["tipo"] == "UnmatchedSlip"
    assert erros[0]["linha"] == 5


def test_envelope_invalido_retorna_422(client, repositorio):
    resposta = _enviar(client, arquivo_com_detalhes(DETALHES, quantidade=2))

    assert resposta.status_code == 422
    assert resposta.get_json()["erro_fatal"]
    assert all(boleto.versao == 0 for boleto in repositorio.listar())


def test_sem_arquivo(client):
    resposta = client.post("/retornos", data={}, content_type="multipart/form-data")
    assert resposta.status_code == 400
    assert "erro" in resposta.get_json()
