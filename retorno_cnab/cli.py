"""Utilitario de linha de comando para processar arquivos de retorno."""

import argparse
import os
import sqlite3
from concurrent.futures import ThreadPoolExecutor

from .config import carregar_configuracao
from .logging_config import configurar_logging
from .processador import ProcessadorRetorno
from .repositorio import RepositorioSQLite


def _criar_parser(configuracao):
    parser = argparse.ArgumentParser(
        prog="processar_retorno",
        description="Processa arquivos de retorno CNAB 400 do Sicredi e concilia os boletos.",
    )
    parser.add_argument("arquivos", nargs="+", help="arquivo(s) de retorno (.ret/.txt)")
    parser.add_argument(
        "--banco-dados",
        default=configuracao.banco_dados,
        help="arquivo SQLite com os boletos (padrao: %(default)s)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="quantidade de arquivos processados em paralelo (padrao: %(default)s)",
    )
    parser.add_argument(
        "--nivel-log",
        default=configuracao.nivel_log,
        help="nivel de log: DEBUG, INFO, WARNING... (padrao: %(default)s)",
    )
    return parser


def imprimir_resultado(caminho, resultado):
    print(f"\n=== {os.path.basename(caminho)} ===")
    print(f"Linhas lidas: {resultado.total_linhas}")

    if resultado.fatal:
        print("Arquivo rejeitado (envelope inconsistente). Nenhum boleto foi alterado:")
        for problema in resultado.erro_fatal:
            print("   -", problema)
        return

    print(f"Eventos aplicados: {resultado.aplicados}")
    print(f"Eventos ja aplicados anteriormente: {resultado.duplicados}")
    print(f"Anomalias ignoradas: {resultado.anomalias}")
    print(f"Ocorrencias nao reconhecidas: {resultado.nao_reconhecidos}")

    if resultado.erros:
        print("\nErros por linha:")
        for erro in resultado.erros:
            print(f"   - Linha {erro.posicao} [{erro.tipo}]: {erro.mensagem}")
    else:
        print("\nNenhum erro nas linhas de detalhe.")

    if resultado.avisos:
        print("\nAvisos:")
        for aviso in resultado.avisos:
            print("   -", aviso)


def processar_arquivos(caminhos, processador, workers=1):
    """
    Processa os arquivos e devolve ``[(caminho, resultado), ...]`` na ordem
    recebida. Com ``workers > 1`` os arquivos rodam em paralelo; cada
    arquivo tem o seu próprio resultado.
    """
    def _processar(caminho):
        with open(caminho, "rb") as f:
            conteudo = f.read()
        return processador.processar(conteudo, nome_arquivo=os.path.basename(caminho))

    if workers <= 1 or len(caminhos) == 1:
        return [(caminho, _processar(caminho)) for caminho in caminhos]

    with ThreadPoolExecutor(max_workers=workers) as executor:
        resultados = list(executor.map(_processar, caminhos))
    return list(zip(caminhos, resultados))


def main(argv=None):
    configuracao = carregar_configuracao()
    args = _criar_parser(configuracao).parse_args(argv)
    configurar_logging(args.nivel_log.upper())

    print("=== Processamento de retorno CNAB 400 (Sicredi) ===")

    faltando = [c for c in args.arquivos if not os.path.isfile(c)]
    if faltando:
        for caminho in faltando:
            print(f"Erro: arquivo nao encontrado: {caminho}")
        return 2

    conexao = sqlite3.connect(args.banco_dados, check_same_thread=False)
    try:
        repositorio = RepositorioSQLite(conexao)
        processador = ProcessadorRetorno.de_configuracao(repositorio, configuracao)
        resultados = processar_arquivos(args.arquivos, processador, args.workers)
    finally:
        conexao.close()

    for caminho, resultado in resultados:
        imprimir_resultado(caminho, resultado)

    return 1 if any(r.fatal for _, r in resultados) else 0


if __name__ == "__main__":
    raise SystemExit(main())
