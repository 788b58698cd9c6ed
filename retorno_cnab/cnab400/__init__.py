"""Leitura, classificação e conferência do retorno CNAB 400 do Sicredi."""
from .layout_sicredi import (
    CNAB400_SICREDI_CODIGO_BANCO,
    LAYOUT_DETALHE,
    LAYOUT_HEADER,
    LAYOUT_TRAILER,
    LAYOUTS_SICREDI,
)

from .decodificador import (
    LinhaBruta,
    codificar_campo,
    codificar_registro,
    decodificar_linha,
    separar_linhas,
)

from .registros import (
    LinhaIlegivel,
    RegistroDetalhe,
    RegistroHeader,
    RegistroTrailer,
    classificar_registro,
)

from .ocorrencias import (
    OCORRENCIAS_SICREDI,
    EventoLiquidacao,
    TipoEvento,
    interpretar_ocorrencia,
)

from .envelope import validar_envelope

__all__ = [
    "CNAB400_SICREDI_CODIGO_BANCO",
    "LAYOUT_DETALHE",
    "LAYOUT_HEADER",
    "LAYOUT_TRAILER",
    "LAYOUTS_SICREDI",
    "LinhaBruta",
    "codificar_campo",
    "codificar_registro",
    "decodificar_linha",
    "separar_linhas",
    "LinhaIlegivel",
    "RegistroDetalhe",
    "RegistroHeader",
    "RegistroTrailer",
    "classificar_registro",
    "OCORRENCIAS_SICREDI",
    "EventoLiquidacao",
    "TipoEvento",
    "interpretar_ocorrencia",
    "validar_envelope",
]
