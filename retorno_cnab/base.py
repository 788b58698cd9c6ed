"""Shared utilities and helpers for the CNAB return processor."""

BANCOS_CNAB = {
    "001": "Banco do Brasil",
    "104": "Caixa Economica Federal",
    "237": "Bradesco",
    "341": "Itau Unibanco",
    "033": "Santander",
    "756": "Sicoob",
    "748": "Sicredi",
}

TAMANHO_REGISTRO_CNAB400 = 400


def identificar_banco(codigo):
    """
    Identifica o banco pelo código de compensação (3 dígitos).
    """
    return codigo, BANCOS_CNAB.get(codigo or "", "Banco não mapeado")


def formatar_centavos(centavos) -> str:
    """Formata centavos no padrão brasileiro: 150000 -> '1.500,00'."""
    if centavos is None:
        return "-"
    valor = centavos / 100.0
    return f"{valor:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
