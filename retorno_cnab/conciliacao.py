"""
Conciliação dos eventos do retorno com os boletos cadastrados.

A política de status é a tabela ``TRANSICOES`` (status atual x tipo de
evento). Pares fora da tabela são anomalias: registradas, nunca aplicadas.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from .base import formatar_centavos
from .cnab400.ocorrencias import EventoLiquidacao, TipoEvento
from .cnab400.utils import _formatar_data_br
from .erros import ConcurrentUpdateError, ConflictingPaymentError, UnmatchedSlipError
from .modelos import AtualizacaoBoleto, Boleto, EventoAplicado, StatusBoleto, Transacao

logger = logging.getLogger(__name__)


class Acao(Enum):
    APLICAR = "aplicar"
    ANOMALIA = "anomalia"
    CONFLITO = "conflito"


@dataclass(frozen=True)
class Transicao:
    acao: Acao
    proximo: Optional[StatusBoleto] = None
    restaura_pre_protesto: bool = False


def _aplicar(proximo):
    return Transicao(Acao.APLICAR, proximo)


_ANOMALIA = Transicao(Acao.ANOMALIA)

_S = StatusBoleto
_T = TipoEvento

TRANSICOES = {
    (_S.EMITIDO, _T.REGISTRADO): _aplicar(_S.EMITIDO),
    (_S.EMITIDO, _T.PAGO): _aplicar(_S.PAGO),
    (_S.EMITIDO, _T.BAIXADO): _aplicar(_S.BAIXADO),
    (_S.EMITIDO, _T.REJEITADO): _aplicar(_S.REJEITADO),
    (_S.EMITIDO, _T.PROTESTADO): _aplicar(_S.PROTESTADO),
    (_S.EMITIDO, _T.VALOR_ALTERADO): _aplicar(_S.EMITIDO),
    # Repetição com o mesmo conteúdo é tratada antes da tabela.
    (_S.PAGO, _T.PAGO): Transicao(Acao.CONFLITO),
    (_S.REJEITADO, _T.REGISTRADO): _aplicar(_S.EMITIDO),
    (_S.REJEITADO, _T.REJEITADO): _aplicar(_S.REJEITADO),
    (_S.PROTESTADO, _T.PROTESTADO): _aplicar(_S.PROTESTADO),
    (_S.PROTESTADO, _T.PROTESTO_SUSTADO): Transicao(Acao.APLICAR, restaura_pre_protesto=True),
    (_S.PROTESTADO, _T.PAGO): _aplicar(_S.PAGO),
    (_S.PROTESTADO, _T.BAIXADO): _aplicar(_S.BAIXADO),
}


def decidir_transicao(status: StatusBoleto, tipo: TipoEvento) -> Transicao:
    return TRANSICOES.get((status, tipo), _ANOMALIA)


class Desfecho(Enum):
    APLICADO = "aplicado"
    DUPLICADO = "duplicado"
    ANOMALIA = "anomalia"
    NAO_RECONHECIDO = "nao_reconhecido"


@dataclass(frozen=True)
class ResultadoConciliacao:
    desfecho: Desfecho
    nosso_numero: str
    mensagem: str = ""
    atualizacao: Optional[AtualizacaoBoleto] = None


def _eh_duplicado(boleto: Boleto, evento: EventoLiquidacao) -> bool:
    # Qualquer entrada do histórico vale, não só a última: reenviar um
    # arquivo antigo depois de um mais novo também é repetição.
    if boleto.ja_aplicado(evento):
        return True
    # Boleto cadastrado já liquidado, sem histórico do pagamento.
    return (
        evento.tipo == TipoEvento.PAGO
        and boleto.ultimo_evento(TipoEvento.PAGO) is None
        and boleto.status == StatusBoleto.PAGO
        and boleto.valor_pago == evento.valor_pago
        and boleto.data_pagamento == evento.data_efetiva
    )


def _agora():
    return datetime.now(timezone.utc)


class MotorConciliacao:
    """
    Decide e grava o efeito de cada ``EventoLiquidacao`` sobre o boleto.

    Cada evento é gravado individualmente no repositório; um erro em um
    evento não desfaz os anteriores.
    """

    def __init__(self, repositorio, relogio=None):
        self.repositorio = repositorio
        self.relogio = relogio or _agora

    def conciliar(self, evento: EventoLiquidacao) -> ResultadoConciliacao:
        detalhe = evento.detalhe
        nosso_numero = evento.nosso_numero

        if evento.tipo == TipoEvento.NAO_RECONHECIDO:
            return ResultadoConciliacao(Desfecho.NAO_RECONHECIDO, nosso_numero)

        boleto = self.repositorio.buscar_por_nosso_numero(nosso_numero)
        if boleto is None:
            raise UnmatchedSlipError(
                f"nosso número {nosso_numero} não encontrado entre os boletos emitidos.",
                detalhe.posicao,
                detalhe.excerto,
            )

        if _eh_duplicado(boleto, evento):
            logger.debug(
                "Linha %d: ocorrência %s já aplicada ao boleto %s.",
                detalhe.posicao,
                evento.codigo_ocorrencia,
                nosso_numero,
            )
            return ResultadoConciliacao(Desfecho.DUPLICADO, nosso_numero)

        transicao = decidir_transicao(boleto.status, evento.tipo)

        if transicao.acao == Acao.CONFLITO:
            raise ConflictingPaymentError(
                f"boleto {nosso_numero} já liquidado em {_formatar_data_br(boleto.data_pagamento) or '-'} "
                f"(R$ {formatar_centavos(boleto.valor_pago)}); retorno informa pagamento em "
                f"{_formatar_data_br(evento.data_efetiva) or '-'} (R$ {formatar_centavos(evento.valor_pago)}).",
                detalhe.posicao,
                detalhe.excerto,
            )

        if transicao.acao == Acao.ANOMALIA:
            mensagem = (
                f"Linha {detalhe.posicao}: ocorrência {evento.descricao} ignorada; "
                f"boleto {nosso_numero} está {boleto.status.value}."
            )
            logger.warning("%s", mensagem)
            return ResultadoConciliacao(Desfecho.ANOMALIA, nosso_numero, mensagem)

        if transicao.restaura_pre_protesto:
            proximo = boleto.status_pre_protesto or StatusBoleto.EMITIDO
        else:
            proximo = transicao.proximo

        pre_protesto = None
        if proximo == StatusBoleto.PROTESTADO:
            if boleto.status == StatusBoleto.PROTESTADO:
                pre_protesto = boleto.status_pre_protesto
            else:
                pre_protesto = boleto.status

        aplicado = EventoAplicado.de_evento(evento, self.relogio())
        transacao = None
        if evento.tipo == TipoEvento.PAGO:
            transacao = Transacao.de_pagamento(nosso_numero, aplicado)

        atualizacao = AtualizacaoBoleto(
            nosso_numero=nosso_numero,
            status_anterior=boleto.status,
            novo_status=proximo,
            evento=aplicado,
            versao_esperada=boleto.versao,
            status_pre_protesto=pre_protesto,
            transacao=transacao,
        )
        if not self.repositorio.aplicar_atualizacao(atualizacao):
            raise ConcurrentUpdateError(
                f"boleto {nosso_numero} foi alterado por outro processamento; reenvie o arquivo.",
                detalhe.posicao,
                detalhe.excerto,
            )

        logger.info(
            "Boleto %s: %s -> %s (ocorrência %s, linha %d).",
            nosso_numero,
            boleto.status.value,
            proximo.value,
            evento.codigo_ocorrencia,
            detalhe.posicao,
        )
        return ResultadoConciliacao(Desfecho.APLICADO, nosso_numero, atualizacao=atualizacao)
