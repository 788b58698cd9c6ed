"""Tipos de registro do retorno CNAB 400 e o classificador."""

from dataclasses import dataclass, fields
from datetime import date
from typing import Optional

from ..erros import SequenceError, UnknownRecordTypeError
from .layout_sicredi import (
    CAMPO_SEQUENCIA,
    CAMPO_VALOR_TITULO,
    TIPO_DETALHE,
    TIPO_HEADER,
    TIPO_TRAILER,
)
from .utils import _campo_cnab400, _so_digitos


@dataclass(frozen=True)
class RegistroHeader:
    posicao: int
    sequencia: Optional[int] = None
    codigo_retorno: Optional[str] = None
    literal_retorno: Optional[str] = None
    codigo_servico: Optional[str] = None
    literal_servico: Optional[str] = None
    codigo_beneficiario: Optional[str] = None
    documento_beneficiario: Optional[str] = None
    codigo_banco: Optional[str] = None
    literal_banco: Optional[str] = None
    data_gravacao: Optional[date] = None
    numero_retorno: Optional[int] = None
    versao_sistema: Optional[str] = None


@dataclass(frozen=True)
class RegistroDetalhe:
    """
    Um título informado pelo banco (registro tipo 1).

    Valores em centavos; ``None`` quando o banco não informou o campo.
    """

    posicao: int
    sequencia: int
    nosso_numero: str
    codigo_ocorrencia: str
    data_ocorrencia: Optional[date] = None
    seu_numero: Optional[str] = None
    data_vencimento: Optional[date] = None
    valor_titulo: Optional[int] = None
    valor_pago: Optional[int] = None
    valor_desconto: Optional[int] = None
    valor_abatimento: Optional[int] = None
    valor_juros: Optional[int] = None
    valor_multa: Optional[int] = None
    valor_tarifa: Optional[int] = None
    documento_pagador: Optional[str] = None
    motivos_ocorrencia: Optional[str] = None
    data_prevista_credito: Optional[date] = None
    tipo_cobranca: Optional[str] = None
    codigo_pagador_cooperativa: Optional[str] = None
    codigo_pagador_associado: Optional[str] = None
    boleto_dda: Optional[str] = None
    excerto: str = ""


@dataclass(frozen=True)
class RegistroTrailer:
    posicao: int
    sequencia: Optional[int] = None
    codigo_retorno: Optional[str] = None
    codigo_banco: Optional[str] = None
    codigo_beneficiario: Optional[str] = None
    quantidade_titulos: Optional[int] = None
    valor_total: Optional[int] = None


@dataclass(frozen=True)
class LinhaIlegivel:
    """
    Linha que falhou na leitura ou na classificação.

    Sequência e valor do título são recuperados direto das colunas quando
    possível, para a conferência de quantidade e totais do envelope.
    """

    posicao: int
    marcador: str
    sequencia: Optional[int] = None
    valor_titulo: Optional[int] = None

    @classmethod
    def de_linha(cls, linha):
        conteudo = linha.conteudo
        seq_raw = _campo_cnab400(conteudo, CAMPO_SEQUENCIA["inicio"], CAMPO_SEQUENCIA["fim"])
        valor_raw = _campo_cnab400(conteudo, CAMPO_VALOR_TITULO["inicio"], CAMPO_VALOR_TITULO["fim"])
        largura_seq = CAMPO_SEQUENCIA["fim"] - CAMPO_SEQUENCIA["inicio"] + 1
        largura_valor = CAMPO_VALOR_TITULO["fim"] - CAMPO_VALOR_TITULO["inicio"] + 1
        sequencia = int(seq_raw) if len(seq_raw) == largura_seq and _so_digitos(seq_raw) else None
        valor = int(valor_raw) if len(valor_raw) == largura_valor and _so_digitos(valor_raw) else None
        return cls(linha.posicao, linha.marcador, sequencia, valor)

    @property
    def ocupa_posicao_de_detalhe(self) -> bool:
        return self.marcador == TIPO_DETALHE


def _montar(cls, campos, **extras):
    nomes = {f.name for f in fields(cls)}
    dados = {nome: valor for nome, valor in campos.items() if nome in nomes}
    dados.update(extras)
    return cls(**dados)


def classificar_registro(campos, posicao: int, excerto: str = ""):
    """
    Transforma o dicionário decodificado no registro tipado.

    Levanta ``UnknownRecordTypeError`` para marcadores fora de 0/1/9 e
    ``SequenceError`` quando o detalhe não traz sequência positiva.
    """
    tipo = campos.get("tipo_registro")
    if tipo == TIPO_HEADER:
        return _montar(RegistroHeader, campos, posicao=posicao)
    if tipo == TIPO_TRAILER:
        return _montar(RegistroTrailer, campos, posicao=posicao)
    if tipo == TIPO_DETALHE:
        sequencia = campos.get("sequencia")
        if not sequencia or sequencia < 1:
            raise SequenceError(
                "sequência do registro (pos. 395-400) deve ser um inteiro positivo.",
                posicao,
                excerto,
            )
        return _montar(RegistroDetalhe, campos, posicao=posicao, excerto=excerto)
    raise UnknownRecordTypeError(
        f"tipo de registro '{tipo}' não faz parte do layout CNAB 400 do Sicredi.",
        posicao,
        excerto,
    )
