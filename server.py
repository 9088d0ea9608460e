import sys
import traceback
from flask import Flask, request, jsonify

from config import ServerConfig
from ll1_parser import (
    LL1Analyzer,
    GrammarError,
    MalformedProduction,
    MissingEndMarker,
    UndefinedNonterminal,
    NoProduction,
    ParseError,
)
from lexical_analyzer import LexicalAnalyzer

app = Flask(__name__)

PARSE_ERROR_TYPES = (
    (MissingEndMarker, "missing_end_marker"),
    (UndefinedNonterminal, "undefined_nonterminal"),
    (NoProduction, "no_production"),
)


# --- HTML Escape Helper ---
def escapeHtml(unsafe):
    if unsafe is None: return ''
    unsafe = str(unsafe)
    return unsafe.replace('&', '&amp;').replace('<', '&lt;').replace('>', '&gt;').replace('"', '&quot;').replace("'", '&#039;')


def grammar_error_response(error: GrammarError):
    print(f"--- Grammar Processing FAILED ---", file=sys.stderr)
    print(f"Error: {error}", file=sys.stderr)
    body = {"error": str(error), "error_type": "grammar_error"}
    if isinstance(error, MalformedProduction):
        body["line"] = error.line_number
    return jsonify(body), 400


def unexpected_error_response(error: Exception):
    print(f"--- UNEXPECTED Python Error: {error} ---", file=sys.stderr)
    traceback.print_exc(file=sys.stderr)
    error_message = f"Unexpected server error: {escapeHtml(str(error))}"
    return jsonify({"error": error_message, "error_type": "system_error"}), 500


# --- Flask Endpoints ---

@app.route('/health')
def health():
    return jsonify({"status": "ok"})

@app.route('/ll1/analyze', methods=['POST'])
def analyze_grammar():
    """
    Build FIRST/FOLLOW sets and the predictive parsing table for a grammar.

    Returns productions, terminals, both set families, the table rows and
    any overwritten cells so the client can flag non-LL(1) grammars.
    """
    data = request.get_json(silent=True) or {}
    grammar_input = data.get('grammar')

    if not grammar_input:
        return jsonify({"error": "No grammar provided"}), 400

    try:
        print("--- Analyzing Grammar ---", file=sys.stderr)
        analyzer = LL1Analyzer(grammar_input)
        summary = analyzer.summary()

        print("--- Grammar Analysis SUCCEEDED ---", file=sys.stderr)
        print(f"Found {len(summary['productions'])} productions", file=sys.stderr)
        if summary['conflicts']:
            print(f"Conflicts detected: {len(summary['conflicts'])}", file=sys.stderr)

        return jsonify(summary)

    except GrammarError as e:
        return grammar_error_response(e)

    except Exception as e:
        return unexpected_error_response(e)

@app.route('/ll1/parse', methods=['POST'])
def parse_input():
    """
    Parse an input string against a grammar with the predictive parser.

    On failure the partial trace is returned alongside the error so the
    client can show how far the derivation got.
    """
    data = request.get_json(silent=True) or {}
    grammar_input = data.get('grammar')
    string_input = data.get('input')

    if not grammar_input:
        return jsonify({"error": "No grammar provided"}), 400
    if not string_input:
        return jsonify({"error": "No input string provided"}), 400

    try:
        analyzer = LL1Analyzer(grammar_input)
    except GrammarError as e:
        return grammar_error_response(e)
    except Exception as e:
        return unexpected_error_response(e)

    try:
        print(f"--- Parsing Input String: '{string_input}' ---", file=sys.stderr)
        trace = analyzer.parse(string_input)
        print("--- Parsing SUCCEEDED ---", file=sys.stderr)

        response_data = analyzer.summary()
        response_data.update({
            "success": True,
            "trace": analyzer.trace_rows(trace),
            "traceSteps": len(trace),
        })
        return jsonify(response_data)

    except ParseError as e:
        print(f"--- Parsing FAILED ---", file=sys.stderr)
        print(f"Error: {e}", file=sys.stderr)

        error_type = "parsing_error"
        for error_class, name in PARSE_ERROR_TYPES:
            if isinstance(e, error_class):
                error_type = name
                break

        response_data = analyzer.summary()
        response_data.update({
            "success": False,
            "error": str(e),
            "error_type": error_type,
            "trace": analyzer.trace_rows(e.trace),
            "traceSteps": len(e.trace),
        })
        return jsonify(response_data), 400

    except Exception as e:
        return unexpected_error_response(e)

@app.route('/lexical/tokenize', methods=['POST'])
def tokenize_source():
    """Tokenize C-like source text; lexical errors come back as ERROR tokens."""
    data = request.get_json(silent=True) or {}
    source_input = data.get('source')

    if source_input is None:
        return jsonify({"error": "No source provided"}), 400

    try:
        print("--- Tokenizing Source ---", file=sys.stderr)
        analyzer = LexicalAnalyzer()
        tokens = analyzer.tokenize(source_input)
        print(f"Produced {len(tokens)} tokens", file=sys.stderr)

        return jsonify({
            "tokens": [token.to_dict() for token in tokens],
            "summary": analyzer.summary(tokens),
            "recognized": {
                lexeme: category.display_name
                for lexeme, category in analyzer.recognized.items()
            },
        })

    except Exception as e:
        return unexpected_error_response(e)

# --- Main Execution ---
if __name__ == '__main__':
    server_config = ServerConfig.from_env()

    print("--- LL(1) Grammar Workbench Server ---")
    print("LL(1) analysis and C-like lexical analysis")
    print(f"Running on http://{server_config.host}:{server_config.port}")
    print("-" * 38)

    app.run(host=server_config.host, port=server_config.port, debug=server_config.debug)
