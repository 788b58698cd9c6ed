"""Funções utilitárias compartilhadas pelo leitor do retorno CNAB 400."""

from datetime import date


class ValorInvalido(ValueError):
    """Conteúdo do campo incompatível com o tipo declarado no layout."""


def _so_digitos(valor: str) -> bool:
    # isdigit() sozinho aceita "²" e outros dígitos Unicode que int() recusa
    return valor.isascii() and valor.isdigit()


def _campo_cnab400(linha: str, pos_inicio: int, pos_fim: int) -> str:
    """
    Retorna o trecho da linha entre as posições informadas (1-based, inclusive).
    """
    if pos_inicio < 1 or pos_fim < pos_inicio:
        return ""
    if len(linha) < pos_inicio:
        return ""
    fim = min(pos_fim, len(linha))
    return linha[pos_inicio - 1:fim]


def _parse_data_cnab400(valor: str):
    """
    Converte DDMMAA em ``date``. Em branco ou ``000000`` significa ausente
    (None); qualquer outro conteúdo fora do calendário é inválido.
    """
    valor = (valor or "").strip()
    if not valor or valor == "000000":
        return None
    if len(valor) != 6 or not _so_digitos(valor):
        raise ValorInvalido(f"data '{valor}' fora do formato DDMMAA")
    dia = int(valor[0:2])
    mes = int(valor[2:4])
    ano = int(valor[4:6])
    ano_full = 1900 + ano if ano >= 70 else 2000 + ano
    try:
        return date(ano_full, mes, dia)
    except ValueError:
        raise ValorInvalido(f"data '{valor}' inexistente") from None


def _parse_data_aaaammdd(valor: str):
    valor = (valor or "").strip()
    if not valor or valor == "00000000":
        return None
    if len(valor) != 8 or not _so_digitos(valor):
        raise ValorInvalido(f"data '{valor}' fora do formato AAAAMMDD")
    try:
        return date(int(valor[0:4]), int(valor[4:6]), int(valor[6:8]))
    except ValueError:
        raise ValorInvalido(f"data '{valor}' inexistente") from None


def _parse_valor_cnab400(raw: str):
    """
    Valores numéricos do CNAB vêm sem separador decimal (centavos implícitos).
    Em branco é ausente (None), nunca zero.
    """
    raw = (raw or "").strip()
    if not raw:
        return None
    if not _so_digitos(raw):
        raise ValorInvalido(f"'{raw}' contém caracteres não numéricos")
    return int(raw)


def _parse_digitos_cnab400(raw: str):
    """Identificadores numéricos: preserva zeros à esquerda."""
    raw = (raw or "").strip()
    if not raw:
        return None
    if not _so_digitos(raw):
        raise ValorInvalido(f"'{raw}' contém caracteres não numéricos")
    return raw


def _formatar_data_br(dt):
    if not dt:
        return None
    return dt.strftime("%d/%m/%Y")
