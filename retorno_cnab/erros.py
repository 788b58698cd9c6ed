"""Erros do processamento de arquivos de retorno CNAB 400."""


class ErroRetorno(Exception):
    """
    Erro associado a uma linha física do arquivo de retorno.

    ``posicao`` é o número da linha no arquivo (1-based) e ``excerto`` um
    trecho do conteúdo bruto, para que quem enviou o arquivo consiga
    localizar e corrigir o registro.
    """

    tipo = "Retorno"

    def __init__(self, mensagem, posicao=None, excerto=""):
        super().__init__(mensagem)
        self.mensagem = mensagem
        self.posicao = posicao
        self.excerto = excerto

    def __str__(self):
        if self.posicao is None:
            return self.mensagem
        return f"Linha {self.posicao}: {self.mensagem}"


class MalformedLineError(ErroRetorno):
    tipo = "MalformedLine"


class UnknownRecordTypeError(ErroRetorno):
    tipo = "UnknownRecordType"


class SequenceError(ErroRetorno):
    tipo = "Sequence"


class InconsistentPaymentError(ErroRetorno):
    tipo = "InconsistentPayment"


class UnmatchedSlipError(ErroRetorno):
    tipo = "UnmatchedSlip"


class ConflictingPaymentError(ErroRetorno):
    tipo = "ConflictingPayment"


class ConcurrentUpdateError(ErroRetorno):
    """O boleto mudou entre a leitura e a gravação da atualização."""

    tipo = "ConcurrentUpdate"


# Erros recuperáveis: registrados no resultado e o lote segue.
ERROS_DE_LINHA = (
    MalformedLineError,
    UnknownRecordTypeError,
    SequenceError,
    InconsistentPaymentError,
    UnmatchedSlipError,
    ConflictingPaymentError,
    ConcurrentUpdateError,
)


class EnvelopeError(Exception):
    """
    Header, trailer ou totais do arquivo inconsistentes.

    É fatal para o lote inteiro: nenhuma atualização é gravada.
    """

    tipo = "Envelope"

    def __init__(self, problemas):
        self.problemas = list(problemas)
        super().__init__("; ".join(self.problemas))
