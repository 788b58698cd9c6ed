"""Leitura posicional das linhas do retorno CNAB 400 do Sicredi."""

import logging
import re
from dataclasses import dataclass

from ..base import TAMANHO_REGISTRO_CNAB400
from ..erros import MalformedLineError
from .layout_sicredi import LAYOUTS_SICREDI
from .utils import (
    ValorInvalido,
    _campo_cnab400,
    _parse_data_aaaammdd,
    _parse_data_cnab400,
    _parse_digitos_cnab400,
    _parse_valor_cnab400,
)

logger = logging.getLogger(__name__)

TAMANHO_EXCERTO_PADRAO = 80

# Só CR, LF e CRLF encerram registro; NEL (0x85 em latin-1) e afins são conteúdo.
_QUEBRA_DE_LINHA = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class LinhaBruta:
    """Uma linha do arquivo e sua posição física (1-based)."""

    posicao: int
    conteudo: str

    @property
    def marcador(self) -> str:
        return self.conteudo[0:1]

    def excerto(self, tamanho=TAMANHO_EXCERTO_PADRAO) -> str:
        return self.conteudo.rstrip()[:tamanho]


def separar_linhas(conteudo, encoding="latin-1"):
    """
    Quebra o conteúdo do arquivo em ``LinhaBruta``.

    Aceita ``str`` ou ``bytes``. Terminadores de linha são removidos e
    linhas em branco ignoradas, mas a numeração continua sendo a física.
    Bytes inválidos no encoding viram U+FFFD; a linha afetada falha depois
    na leitura dos campos, sem derrubar o lote.
    Um arquivo gravado sem quebras de linha (registros de 400 colunas
    colados) é fatiado de 400 em 400.
    """
    if isinstance(conteudo, (bytes, bytearray)):
        bruto = bytes(conteudo)
        try:
            conteudo = bruto.decode(encoding)
        except UnicodeDecodeError as exc:
            logger.warning("Conteúdo inválido para o encoding %s: %s", encoding, exc)
            conteudo = bruto.decode(encoding, errors="replace")

    fisicas = _QUEBRA_DE_LINHA.split(conteudo)
    nao_vazias = [linha for linha in fisicas if linha.strip()]
    if (
        len(nao_vazias) == 1
        and len(nao_vazias[0]) > TAMANHO_REGISTRO_CNAB400
        and len(nao_vazias[0]) % TAMANHO_REGISTRO_CNAB400 == 0
    ):
        bloco = nao_vazias[0]
        fisicas = [
            bloco[i:i + TAMANHO_REGISTRO_CNAB400]
            for i in range(0, len(bloco), TAMANHO_REGISTRO_CNAB400)
        ]
        logger.debug("Arquivo sem quebras de linha: %d registros fatiados.", len(fisicas))

    linhas = []
    for numero_linha, linha in enumerate(fisicas, start=1):
        if not linha.strip():
            continue
        linhas.append(LinhaBruta(numero_linha, linha.rstrip("\r\n")))
    return linhas


_CONVERSORES = {
    "alfa": lambda bruto: bruto.strip() or None,
    "digitos": _parse_digitos_cnab400,
    "numero": _parse_valor_cnab400,
    "valor": _parse_valor_cnab400,
    "data": _parse_data_cnab400,
    "data_aaaammdd": _parse_data_aaaammdd,
}


def decodificar_campo(linha: str, campo):
    """Em branco vira ``None`` para todos os tipos."""
    bruto = _campo_cnab400(linha, campo["inicio"], campo["fim"])
    return _CONVERSORES[campo["tipo"]](bruto)


def decodificar_linha(linha: LinhaBruta, tamanho_excerto=TAMANHO_EXCERTO_PADRAO):
    """
    Fatia a linha conforme o layout do tipo de registro (posição 001).

    Devolve um dicionário ``campo -> valor``. Campos numéricos, de valor e
    de data em branco viram ``None``, nunca zero. Para marcadores fora do
    layout devolve apenas ``tipo_registro``; quem decide se isso é erro é
    o classificador.
    """
    registro = linha.conteudo
    if len(registro) != TAMANHO_REGISTRO_CNAB400:
        raise MalformedLineError(
            f"registro com {len(registro)} caracteres, esperado {TAMANHO_REGISTRO_CNAB400}.",
            linha.posicao,
            linha.excerto(tamanho_excerto),
        )

    layout = LAYOUTS_SICREDI.get(linha.marcador)
    if layout is None:
        return {"tipo_registro": linha.marcador}

    campos = {}
    for nome, campo in layout.items():
        pos_str = f"(pos. {campo['inicio']:03d}-{campo['fim']:03d})"
        try:
            valor = decodificar_campo(registro, campo)
        except ValorInvalido as exc:
            raise MalformedLineError(
                f"campo {nome} {pos_str}: {exc}.",
                linha.posicao,
                linha.excerto(tamanho_excerto),
            ) from None
        if campo.get("obrigatorio") and valor is None:
            raise MalformedLineError(
                f"campo obrigatório {nome} {pos_str} em branco.",
                linha.posicao,
                linha.excerto(tamanho_excerto),
            )
        campos[nome] = valor
    return campos


def codificar_campo(campo, valor) -> str:
    """Grava um valor decodificado de volta na largura do campo."""
    largura = campo["fim"] - campo["inicio"] + 1
    tipo = campo["tipo"]
    if valor is None:
        return " " * largura
    if tipo == "alfa":
        texto = str(valor).ljust(largura)
    elif tipo == "digitos":
        texto = str(valor).rjust(largura, "0")
    elif tipo in ("numero", "valor"):
        texto = f"{valor:0{largura}d}"
    elif tipo == "data":
        texto = valor.strftime("%d%m%y")
    elif tipo == "data_aaaammdd":
        texto = valor.strftime("%Y%m%d")
    else:
        raise ValueError(f"tipo de campo desconhecido: {tipo}")
    if len(texto) != largura:
        raise ValueError(f"valor '{valor}' não cabe em {largura} posições")
    return texto


def codificar_registro(tipo_registro: str, valores) -> str:
    """
    Monta uma linha de 400 colunas a partir de ``valores``; campos omitidos
    ficam em branco.
    """
    layout = LAYOUTS_SICREDI[tipo_registro]
    colunas = [" "] * TAMANHO_REGISTRO_CNAB400
    dados = dict(valores)
    dados.setdefault("tipo_registro", tipo_registro)
    for nome, campo in layout.items():
        if nome not in dados:
            continue
        texto = codificar_campo(campo, dados[nome])
        colunas[campo["inicio"] - 1:campo["fim"]] = list(texto)
    return "".join(colunas)
