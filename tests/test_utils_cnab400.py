import datetime

import pytest

from retorno_cnab.cnab400.utils import (
    ValorInvalido,
    _campo_cnab400,
    _parse_data_aaaammdd,
    _parse_data_cnab400,
    _parse_digitos_cnab400,
    _parse_valor_cnab400,
)


@pytest.mark.parametrize(
    "valor, esperado",
    [
        ("150224", datetime.date(2024, 2, 15)),
        ("311299", datetime.date(1999, 12, 31)),
        ("000000", None),
        ("      ", None),
        ("", None),
    ],
)
def test_parse_data_cnab400(valor, esperado):
    assert _parse_data_cnab400(valor) == esperado


@pytest.mark.parametrize("valor", ["320299", "1502A4", "15022", "1503²4", "١٥٠٣٢٤"])
def test_parse_data_cnab400_invalida(valor):
    with pytest.raises(ValorInvalido):
        _parse_data_cnab400(valor)


def test_parse_data_aaaammdd():
    assert _parse_data_aaaammdd("20240315") == datetime.date(2024, 3, 15)
    assert _parse_data_aaaammdd("        ") is None
    with pytest.raises(ValorInvalido):
        _parse_data_aaaammdd("20241315")
    with pytest.raises(ValorInvalido):
        _parse_data_aaaammdd("2024031²")


@pytest.mark.parametrize(
    "raw, esperado",
    [
        ("", None),
        ("             ", None),
        ("0000000000000", 0),
        ("0000000012345", 12345),
    ],
)
def test_parse_valor_cnab400(raw, esperado):
    assert _parse_valor_cnab400(raw) == esperado


@pytest.mark.parametrize("raw", ["12A45", "  12 45", "-100", "000000001500²", "¹²³", "١٢٣"])
def test_parse_valor_cnab400_invalido(raw):
    with pytest.raises(ValorInvalido):
        _parse_valor_cnab400(raw)


def test_parse_digitos_preserva_zeros_a_esquerda():
    assert _parse_digitos_cnab400("00012345678909") == "00012345678909"
    assert _parse_digitos_cnab400("   ") is None
    with pytest.raises(ValorInvalido):
        _parse_digitos_cnab400("000123³")


def test_campo_cnab400_posicoes_inclusivas():
    linha = "0123456789"
    assert _campo_cnab400(linha, 1, 1) == "0"
    assert _campo_cnab400(linha, 3, 5) == "234"
    assert _campo_cnab400(linha, 9, 15) == "89"
    assert _campo_cnab400(linha, 11, 12) == ""
