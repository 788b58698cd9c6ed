from datetime import datetime, timezone

import pytest

from retorno_cnab import Boleto, MotorConciliacao, ProcessadorRetorno, RepositorioMemoria

MOMENTO_FIXO = datetime(2024, 3, 16, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def relogio():
    return lambda: MOMENTO_FIXO


@pytest.fixture
def repositorio():
    return RepositorioMemoria([
        Boleto("000000101", valor_titulo=15000, seu_numero="DOC0001"),
        Boleto("000000102", valor_titulo=15000, seu_numero="DOC0002"),
        Boleto("000000103", valor_titulo=15000, seu_numero="DOC0003"),
    ])


@pytest.fixture
def motor(repositorio, relogio):
    return MotorConciliacao(repositorio, relogio=relogio)


@pytest.fixture
def processador(repositorio, motor):
    return ProcessadorRetorno(repositorio, motor=motor)
