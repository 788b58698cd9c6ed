import datetime
import sqlite3
from dataclasses import replace

import pytest

from fabrica_cnab import arquivo_com_detalhes
from retorno_cnab import (
    AtualizacaoBoleto,
    Boleto,
    EventoAplicado,
    MotorConciliacao,
    ProcessadorRetorno,
    RepositorioMemoria,
    RepositorioSQLite,
    StatusBoleto,
    Transacao,
)
from retorno_cnab.cnab400 import TipoEvento

MOMENTO = datetime.datetime(2024, 3, 16, 9, 30, tzinfo=datetime.timezone.utc)


@pytest.fixture
def conexao():
    conn = sqlite3.connect(":memory:")
    yield conn
    conn.close()


@pytest.fixture(params=["memoria", "sqlite"])
def repo(request, conexao):
    if request.param == "memoria":
        repositorio = RepositorioMemoria()
    else:
        repositorio = RepositorioSQLite(conexao)
    repositorio.cadastrar(Boleto("000000101", valor_titulo=15000, seu_numero="DOC0001"))
    return repositorio


def _pagamento(versao_esperada, valor=15000):
    evento = EventoAplicado(
        tipo=TipoEvento.PAGO,
        codigo_ocorrencia="06",
        data_efetiva=datetime.date(2024, 3, 15),
        valor=valor,
        aplicado_em=MOMENTO,
        valor_juros=120,
        posicao_origem=3,
    )
    return AtualizacaoBoleto(
        nosso_numero="000000101",
        status_anterior=StatusBoleto.EMITIDO,
        novo_status=StatusBoleto.PAGO,
        evento=evento,
        versao_esperada=versao_esperada,
    )


def test_busca_boleto_cadastrado(repo):
    boleto = repo.buscar_por_nosso_numero("000000101")

    assert boleto.status == StatusBoleto.EMITIDO
    assert boleto.valor_titulo == 15000
    assert boleto.seu_numero == "DOC0001"
    assert boleto.versao == 0
    assert boleto.eventos == ()


def test_boleto_inexistente(repo):
    assert repo.buscar_por_nosso_numero("000000999") is None


def test_aplicar_atualizacao_grava_status_e_historico(repo):
    assert repo.aplicar_atualizacao(_pagamento(versao_esperada=0))

    boleto = repo.buscar_por_nosso_numero("000000101")
    assert boleto.status == StatusBoleto.PAGO
    assert boleto.valor_pago == 15000
    assert boleto.data_pagamento == datetime.date(2024, 3, 15)
    assert boleto.versao == 1
    assert len(boleto.eventos) == 1
    evento = boleto.eventos[0]
    assert evento.tipo == TipoEvento.PAGO
    assert evento.valor_juros == 120
    assert evento.posicao_origem == 3
    assert evento.aplicado_em == MOMENTO


def test_versao_desatualizada_e_recusada(repo):
    assert repo.aplicar_atualizacao(_pagamento(versao_esperada=0))
    assert not repo.aplicar_atualizacao(_pagamento(versao_esperada=0, valor=99))

    boleto = repo.buscar_por_nosso_numero("000000101")
    assert boleto.valor_pago == 15000
    assert len(boleto.eventos) == 1


def test_atualizacao_de_boleto_inexistente(repo):
    atualizacao = _pagamento(versao_esperada=0)
    outra = AtualizacaoBoleto(
        nosso_numero="000000999",
        status_anterior=atualizacao.status_anterior,
        novo_status=atualizacao.novo_status,
        evento=atualizacao.evento,
        versao_esperada=0,
    )
    assert not repo.aplicar_atualizacao(outra)


def test_status_pre_protesto_persistido(conexao):
    repositorio = RepositorioSQLite(conexao)
    repositorio.cadastrar(Boleto(
        "000000105",
        status=StatusBoleto.PROTESTADO,
        status_pre_protesto=StatusBoleto.EMITIDO,
    ))
    assert repositorio.buscar_por_nosso_numero("000000105").status_pre_protesto == StatusBoleto.EMITIDO


def test_reprocessamento_com_sqlite(conexao):
    repositorio = RepositorioSQLite(conexao)
    for nosso_numero in ("000000101", "000000102", "000000103"):
        repositorio.cadastrar(Boleto(nosso_numero, valor_titulo=15000))
    processador = ProcessadorRetorno(repositorio, motor=MotorConciliacao(repositorio, relogio=lambda: MOMENTO))
    conteudo = arquivo_com_detalhes([
        {"nosso_numero": "000000101", "ocorrencia": "02"},
        {"nosso_numero": "000000102", "ocorrencia": "06", "valor_pago": 15000},
        {"nosso_numero": "000000103", "ocorrencia": "09"},
    ])

    primeiro = processador.processar(conteudo)
    segundo = processador.processar(conteudo)

    assert primeiro.aplicados == 3
    assert segundo.aplicados == 0
    assert segundo.duplicados == 3
    assert conexao.execute("SELECT COUNT(*) FROM boleto_eventos").fetchone()[0] == 3


def test_criar_tabelas_e_idempotente(conexao):
    RepositorioSQLite(conexao)
    RepositorioSQLite(conexao)
    tabelas = {row[0] for row in conexao.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
    assert {"boletos", "boleto_eventos"} <= tabelas


def test_liquidacao_grava_transacao(repo):
    transacao = Transacao(
        nosso_numero="000000101",
        codigo_ocorrencia="06",
        data_pagamento=datetime.date(2024, 3, 15),
        valor_pago=15000,
        valor_liquido=14805,
        registrada_em=MOMENTO,
        valor_juros=120,
        valor_tarifa=195,
    )
    atualizacao = replace(_pagamento(versao_esperada=0), transacao=transacao)

    assert repo.aplicar_atualizacao(atualizacao)
    assert repo.listar_transacoes() == [transacao]
    assert repo.listar_transacoes("000000999") == []


def test_atualizacao_recusada_nao_grava_transacao(repo):
    transacao = Transacao.de_pagamento("000000101", _pagamento(versao_esperada=0).evento)
    atualizacao = replace(_pagamento(versao_esperada=3), transacao=transacao)

    assert not repo.aplicar_atualizacao(atualizacao)
    assert repo.listar_transacoes() == []


def test_reprocessamento_nao_duplica_transacao(conexao):
    repositorio = RepositorioSQLite(conexao)
    repositorio.cadastrar(Boleto("000000102", valor_titulo=15000))
    processador = ProcessadorRetorno(repositorio, motor=MotorConciliacao(repositorio, relogio=lambda: MOMENTO))
    conteudo = arquivo_com_detalhes([
        {"nosso_numero": "000000102", "ocorrencia": "06", "valor_pago": 15000, "valor_tarifa": 195},
    ])

    processador.processar(conteudo)
    processador.processar(conteudo)

    assert conexao.execute("SELECT COUNT(*) FROM transacoes").fetchone()[0] == 1
    transacao = repositorio.listar_transacoes("000000102")[0]
    assert transacao.valor_liquido == 14805
    assert transacao.registrada_em == MOMENTO
