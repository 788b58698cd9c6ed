"""Processamento de arquivos de retorno CNAB 400 (Sicredi) e conciliação de boletos."""
from .cnab400 import *  # noqa: F401,F403
from .cnab400 import __all__ as _CNAB400_ALL

from .conciliacao import (
    TRANSICOES,
    Desfecho,
    MotorConciliacao,
    decidir_transicao,
)

from .erros import (
    ConcurrentUpdateError,
    ConflictingPaymentError,
    EnvelopeError,
    ErroRetorno,
    InconsistentPaymentError,
    MalformedLineError,
    SequenceError,
    UnknownRecordTypeError,
    UnmatchedSlipError,
)

from .modelos import (
    AtualizacaoBoleto,
    Boleto,
    EventoAplicado,
    StatusBoleto,
    Transacao,
)

from .processador import ProcessadorRetorno

from .repositorio import (
    RepositorioBoletos,
    RepositorioMemoria,
    RepositorioSQLite,
)

from .resultado import ErroLinha, ResultadoLote

__all__ = list(_CNAB400_ALL) + [
    "TRANSICOES",
    "Desfecho",
    "MotorConciliacao",
    "decidir_transicao",
    "ConcurrentUpdateError",
    "ConflictingPaymentError",
    "EnvelopeError",
    "ErroRetorno",
    "InconsistentPaymentError",
    "MalformedLineError",
    "SequenceError",
    "UnknownRecordTypeError",
    "UnmatchedSlipError",
    "AtualizacaoBoleto",
    "Boleto",
    "EventoAplicado",
    "StatusBoleto",
    "Transacao",
    "ProcessadorRetorno",
    "RepositorioBoletos",
    "RepositorioMemoria",
    "RepositorioSQLite",
    "ErroLinha",
    "ResultadoLote",
]
