"""Resultado do processamento de um arquivo de retorno."""

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class ErroLinha:
    posicao: Optional[int]
    excerto: str
    tipo: str
    mensagem: str

    @classmethod
    def de_excecao(cls, exc):
        return cls(exc.posicao, exc.excerto, exc.tipo, exc.mensagem)

    def como_dict(self):
        return {
            "linha": self.posicao,
            "excerto": self.excerto,
            "tipo": self.tipo,
            "mensagem": self.mensagem,
        }


@dataclass(frozen=True)
class ResultadoLote:
    """
    Resumo de um arquivo processado.

    ``erro_fatal`` traz os problemas de envelope; quando presente, nada foi
    gravado e só a contagem de linhas acompanha o resultado.
    """

    total_linhas: int = 0
    aplicados: int = 0
    duplicados: int = 0
    anomalias: int = 0
    nao_reconhecidos: int = 0
    erros: Tuple[ErroLinha, ...] = ()
    avisos: Tuple[str, ...] = ()
    erro_fatal: Optional[Tuple[str, ...]] = None

    @property
    def fatal(self) -> bool:
        return self.erro_fatal is not None

    @classmethod
    def de_envelope_invalido(cls, total_linhas, erro):
        return cls(total_linhas=total_linhas, erro_fatal=tuple(erro.problemas))

    def como_dict(self):
        return {
            "total_linhas": self.total_linhas,
            "aplicados": self.aplicados,
            "duplicados": self.duplicados,
            "anomalias": self.anomalias,
            "nao_reconhecidos": self.nao_reconhecidos,
            "erros": [erro.como_dict() for erro in self.erros],
            "avisos": list(self.avisos),
            "erro_fatal": list(self.erro_fatal) if self.erro_fatal is not None else None,
        }


@dataclass
class AcumuladorLote:
    """Contadores mutáveis usados durante o processamento."""

    total_linhas: int = 0
    aplicados: int = 0
    duplicados: int = 0
    anomalias: int = 0
    nao_reconhecidos: int = 0
    erros: list = field(default_factory=list)
    avisos: list = field(default_factory=list)

    def registrar_erro(self, exc):
        self.erros.append(ErroLinha.de_excecao(exc))

    def finalizar(self) -> ResultadoLote:
        return ResultadoLote(
            total_linhas=self.total_linhas,
            aplicados=self.aplicados,
            duplicados=self.duplicados,
            anomalias=self.anomalias,
            nao_reconhecidos=self.nao_reconhecidos,
            erros=tuple(sorted(self.erros, key=lambda e: e.posicao or 0)),
            avisos=tuple(self.avisos),
        )
