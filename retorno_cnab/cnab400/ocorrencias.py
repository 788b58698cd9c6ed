"""Interpretação dos códigos de ocorrência do retorno Sicredi."""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from ..base import formatar_centavos
from ..erros import InconsistentPaymentError
from .registros import RegistroDetalhe

logger = logging.getLogger(__name__)


class TipoEvento(Enum):
    REGISTRADO = "registrado"
    PAGO = "pago"
    BAIXADO = "baixado"
    REJEITADO = "rejeitado"
    PROTESTADO = "protestado"
    PROTESTO_SUSTADO = "protesto_sustado"
    VALOR_ALTERADO = "valor_alterado"
    NAO_RECONHECIDO = "nao_reconhecido"


OCORRENCIAS_SICREDI = {
    "02": (TipoEvento.REGISTRADO, "Entrada confirmada"),
    "03": (TipoEvento.REJEITADO, "Entrada rejeitada"),
    "06": (TipoEvento.PAGO, "Liquidação normal"),
    "09": (TipoEvento.BAIXADO, "Baixado automaticamente via arquivo"),
    "10": (TipoEvento.BAIXADO, "Baixado conforme instruções da cooperativa"),
    "15": (TipoEvento.PAGO, "Liquidação em cartório"),
    "17": (TipoEvento.PAGO, "Liquidação após baixa"),
    "19": (TipoEvento.PROTESTADO, "Confirmação de recebimento de instrução de protesto"),
    "20": (TipoEvento.PROTESTO_SUSTADO, "Confirmação de recebimento de instrução de sustação de protesto"),
    "23": (TipoEvento.PROTESTADO, "Entrada de título em cartório"),
    "24": (TipoEvento.REJEITADO, "Entrada rejeitada por CEP irregular"),
    "33": (TipoEvento.VALOR_ALTERADO, "Confirmação de alteração do valor do título"),
    "34": (TipoEvento.PROTESTO_SUSTADO, "Retirado de cartório e manutenção em carteira"),
}


@dataclass(frozen=True)
class EventoLiquidacao:
    tipo: TipoEvento
    codigo_ocorrencia: str
    detalhe: RegistroDetalhe
    data_efetiva: Optional[date] = None
    valor_pago: Optional[int] = None
    valor_juros: Optional[int] = None
    valor_desconto: Optional[int] = None
    valor_abatimento: Optional[int] = None
    valor_tarifa: Optional[int] = None
    novo_valor_titulo: Optional[int] = None
    motivo_rejeicao: Optional[str] = None

    @property
    def nosso_numero(self) -> str:
        return self.detalhe.nosso_numero

    @property
    def valor_referencia(self) -> Optional[int]:
        """Valor usado para reconhecer um evento repetido."""
        if self.tipo == TipoEvento.PAGO:
            return self.valor_pago
        if self.tipo == TipoEvento.VALOR_ALTERADO:
            return self.novo_valor_titulo
        return None

    @property
    def descricao(self) -> str:
        _, texto = OCORRENCIAS_SICREDI.get(self.codigo_ocorrencia, (None, "Ocorrência não reconhecida"))
        return f"{self.codigo_ocorrencia} - {texto}"


def _somar_opcionais(*valores):
    informados = [v for v in valores if v is not None]
    if not informados:
        return None
    return sum(informados)


def interpretar_ocorrencia(detalhe: RegistroDetalhe) -> EventoLiquidacao:
    """
    Traduz o código de ocorrência do detalhe em um ``EventoLiquidacao``.

    Códigos desconhecidos não são erro: viram ``NAO_RECONHECIDO`` e nunca
    alteram o boleto. Uma liquidação sem valor pago positivo ou sem data
    é ``InconsistentPaymentError``; uma baixa ignora os campos de valor.
    """
    codigo = detalhe.codigo_ocorrencia
    tipo, _ = OCORRENCIAS_SICREDI.get(codigo, (TipoEvento.NAO_RECONHECIDO, None))

    if tipo == TipoEvento.NAO_RECONHECIDO:
        logger.info(
            "Linha %d: ocorrência '%s' não reconhecida para o nosso número %s; registrada apenas para auditoria.",
            detalhe.posicao,
            codigo,
            detalhe.nosso_numero,
        )
        return EventoLiquidacao(tipo, codigo, detalhe, data_efetiva=detalhe.data_ocorrencia)

    if tipo == TipoEvento.PAGO:
        if not detalhe.valor_pago:
            raise InconsistentPaymentError(
                f"ocorrência {codigo} (liquidação) com valor pago (pos. 267-279) zerado ou em branco.",
                detalhe.posicao,
                detalhe.excerto,
            )
        if detalhe.data_ocorrencia is None:
            raise InconsistentPaymentError(
                f"ocorrência {codigo} (liquidação) sem data da ocorrência (pos. 111-116).",
                detalhe.posicao,
                detalhe.excerto,
            )
        return EventoLiquidacao(
            tipo,
            codigo,
            detalhe,
            data_efetiva=detalhe.data_ocorrencia,
            valor_pago=detalhe.valor_pago,
            valor_juros=_somar_opcionais(detalhe.valor_juros, detalhe.valor_multa),
            valor_desconto=detalhe.valor_desconto,
            valor_abatimento=detalhe.valor_abatimento,
            valor_tarifa=detalhe.valor_tarifa,
        )

    if tipo == TipoEvento.VALOR_ALTERADO:
        if not detalhe.valor_titulo:
            raise InconsistentPaymentError(
                f"ocorrência {codigo} (alteração de valor) sem novo valor do título (pos. 153-165).",
                detalhe.posicao,
                detalhe.excerto,
            )
        logger.debug(
            "Linha %d: novo valor do título %s = R$ %s.",
            detalhe.posicao,
            detalhe.nosso_numero,
            formatar_centavos(detalhe.valor_titulo),
        )
        return EventoLiquidacao(
            tipo,
            codigo,
            detalhe,
            data_efetiva=detalhe.data_ocorrencia,
            novo_valor_titulo=detalhe.valor_titulo,
        )

    if tipo == TipoEvento.REJEITADO:
        return EventoLiquidacao(
            tipo,
            codigo,
            detalhe,
            data_efetiva=detalhe.data_ocorrencia,
            motivo_rejeicao=detalhe.motivos_ocorrencia,
        )

    # Registro, baixa e protesto não têm efeito financeiro.
    return EventoLiquidacao(tipo, codigo, detalhe, data_efetiva=detalhe.data_ocorrencia)
