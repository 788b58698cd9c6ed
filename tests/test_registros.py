from dataclasses import asdict

import pytest

from fabrica_cnab import linha_detalhe, linha_header, linha_trailer
from retorno_cnab import SequenceError, UnknownRecordTypeError
from retorno_cnab.cnab400 import (
    LinhaBruta,
    LinhaIlegivel,
    RegistroDetalhe,
    RegistroHeader,
    RegistroTrailer,
    classificar_registro,
    codificar_registro,
    decodificar_linha,
)


def _classificar(conteudo, posicao=1):
    linha = LinhaBruta(posicao, conteudo)
    return classificar_registro(decodificar_linha(linha), posicao, linha.excerto())


def test_classifica_os_tres_tipos():
    header = _classificar(linha_header(sequencia=1), 1)
    detalhe = _classificar(linha_detalhe(2, "000000101", "02"), 2)
    trailer = _classificar(linha_trailer(3, 1, 15000), 3)

    assert isinstance(header, RegistroHeader)
    assert header.codigo_banco == "748"
    assert isinstance(detalhe, RegistroDetalhe)
    assert detalhe.posicao == 2
    assert detalhe.nosso_numero == "000000101"
    assert detalhe.excerto.startswith("1")
    assert isinstance(trailer, RegistroTrailer)
    assert trailer.quantidade_titulos == 1


@pytest.mark.parametrize("marcador", ["2", "5", "7", "X"])
def test_marcador_desconhecido(marcador):
    with pytest.raises(UnknownRecordTypeError) as exc:
        _classificar(marcador + " " * 399, 4)
    assert exc.value.posicao == 4
    assert marcador in exc.value.mensagem


@pytest.mark.parametrize("sequencia", [None, 0])
def test_detalhe_sem_sequencia_positiva(sequencia):
    with pytest.raises(SequenceError):
        _classificar(linha_detalhe(sequencia, "000000101", "02"), 2)


def test_linha_ilegivel_recupera_sequencia_e_valor():
    conteudo = linha_detalhe(3, "000000101", "06", valor_titulo=12345)
    conteudo = conteudo[:266] + "ABCDEFGHIJKLM" + conteudo[279:]
    ilegivel = LinhaIlegivel.de_linha(LinhaBruta(4, conteudo))

    assert ilegivel.sequencia == 3
    assert ilegivel.valor_titulo == 12345
    assert ilegivel.ocupa_posicao_de_detalhe


def test_linha_ilegivel_curta():
    ilegivel = LinhaIlegivel.de_linha(LinhaBruta(2, "1" + "0" * 100))

    assert ilegivel.sequencia is None
    assert ilegivel.valor_titulo is None
    assert ilegivel.ocupa_posicao_de_detalhe


def test_linha_ilegivel_de_outro_tipo_nao_ocupa_detalhe():
    assert not LinhaIlegivel.de_linha(LinhaBruta(2, "7" + " " * 399)).ocupa_posicao_de_detalhe


def test_detalhe_classificado_reconstroi_a_linha():
    linha = linha_detalhe(
        7, "000000102", "06", valor_pago=15200, valor_juros=200, valor_tarifa=195, motivos="00",
    )
    detalhe = _classificar(linha, 8)

    assert codificar_registro("1", asdict(detalhe)) == linha


def test_linha_ilegivel_ignora_digitos_nao_ascii():
    conteudo = linha_detalhe(3, "000000101", "06", valor_titulo=12345)
    conteudo = conteudo[:152] + "00000001234²5" + conteudo[165:394] + "00000³"
    ilegivel = LinhaIlegivel.de_linha(LinhaBruta(4, conteudo))

    assert ilegivel.sequencia is None
    assert ilegivel.valor_titulo is None
