"""Ponto de entrada de linha de comando do processador de retorno.

Reexporta a API pública do pacote ``retorno_cnab``.
"""

from retorno_cnab import *  # noqa: F401,F403
from retorno_cnab import __all__ as _RETORNO_ALL
from retorno_cnab.cli import main

__all__ = list(_RETORNO_ALL) + ["main"]


if __name__ == "__main__":
    raise SystemExit(main())
