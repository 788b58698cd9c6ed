import sqlite3

from fabrica_cnab import arquivo_com_detalhes
from retorno_cnab import Boleto, RepositorioSQLite, StatusBoleto
from retorno_cnab.cli import main

DETALHES = [
    {"nosso_numero": "000000101", "ocorrencia": "02"},
    {"nosso_numero": "000000102", "ocorrencia": "06", "valor_pago": 15000},
]


def _preparar_banco(caminho):
    conexao = sqlite3.connect(caminho)
    repositorio = RepositorioSQLite(conexao)
    repositorio.cadastrar(Boleto("000000101", valor_titulo=15000))
    repositorio.cadastrar(Boleto("000000102", valor_titulo=15000))
    conexao.close()


def _status(caminho, nosso_numero):
    conexao = sqlite3.connect(caminho)
    try:
        return RepositorioSQLite(conexao).buscar_por_nosso_numero(nosso_numero).status
    finally:
        conexao.close()


def test_processa_arquivos(tmp_path, capsys):
    banco = tmp_path / "boletos.sqlite3"
    _preparar_banco(banco)
    retorno = tmp_path / "CB150324.RET"
    retorno.write_bytes(arquivo_com_detalhes(DETALHES).encode("latin-1"))

    codigo = main([str(retorno), "--banco-dados", str(banco), "--nivel-log", "warning"])

    assert codigo == 0
    saida = capsys.readouterr().out
    assert "CB150324.RET" in saida
    assert "Eventos aplicados: 2" in saida
    assert _status(banco, "000000102") == StatusBoleto.PAGO


def test_varios_arquivos_em_paralelo(tmp_path, capsys):
    banco = tmp_path / "boletos.sqlite3"
    _preparar_banco(banco)
    bom = tmp_path / "bom.ret"
    bom.write_text(arquivo_com_detalhes(DETALHES), encoding="latin-1")
    ruim = tmp_path / "ruim.ret"
    ruim.write_text(arquivo_com_detalhes(DETALHES, quantidade=5), encoding="latin-1")

    codigo = main([str(bom), str(ruim), "--banco-dados", str(banco), "--workers", "2"])

    assert codigo == 1
    saida = capsys.readouterr().out
    assert "Arquivo rejeitado" in saida
    assert "Eventos aplicados: 2" in saida


def test_arquivo_inexistente(tmp_path, capsys):
    codigo = main([str(tmp_path / "nao_existe.ret"), "--banco-dados", str(tmp_path / "b.db")])

    assert codigo == 2
    assert "nao encontrado" in capsys.readouterr().out
