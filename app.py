import sqlite3

from flask import Flask, jsonify, request
from retorno_cnab import ProcessadorRetorno, RepositorioSQLite
from retorno_cnab.config import carregar_configuracao
from retorno_cnab.logging_config import configurar_logging

configuracao = carregar_configuracao()
configurar_logging(configuracao.nivel_log)

app = Flask(__name__)
app.config.setdefault("REPOSITORIO", None)


def _repositorio():
    """
    Repositório de boletos da aplicação. Se nenhum foi configurado
    (``app.config["REPOSITORIO"]``), abre o SQLite da configuração.
    """
    repositorio = app.config.get("REPOSITORIO")
    if repositorio is None:
        conexao = sqlite3.connect(configuracao.banco_dados, check_same_thread=False)
        repositorio = RepositorioSQLite(conexao)
        app.config["REPOSITORIO"] = repositorio
    return repositorio


@app.route("/retornos", methods=["POST"])
def processar_retorno():
    """
    Recebe o arquivo de retorno (campo ``arquivo``), processa e devolve o
    resultado em JSON: 200 mesmo com erros de linha, 422 quando o envelope
    do arquivo é inválido e nada foi gravado.
    """
    arquivo = request.files.get("arquivo")
    if not arquivo:
        return jsonify({"erro": "Nenhum arquivo enviado."}), 400

    conteudo = arquivo.read()
    processador = ProcessadorRetorno.de_configuracao(_repositorio(), configuracao)
    resultado = processador.processar(conteudo, nome_arquivo=arquivo.filename or "<upload>")

    status = 422 if resultado.fatal else 200
    return jsonify(resultado.como_dict()), status


if __name__ == "__main__":
    # debug=True é útil durante o desenvolvimento
    app.run(debug=True)
