"""
Flask REST API for the Calcpad Web Portal
Drives per-session calculators through the keypad command surface
"""
from flask import Flask, jsonify, request
from flask_cors import CORS
from collections import OrderedDict
import logging
import threading
import uuid

import config
import evaluator
from calculator import Calculator
from evaluator import EvaluationError
from history_manager import HistoryManager

logger = logging.getLogger("calcpad.api")

app = Flask(__name__)
CORS(app)  # Enable CORS for all routes


class Session:
    """One keypad session: a calculator, its history and the lock that serialises presses"""

    def __init__(self):
        self.id = uuid.uuid4().hex
        self.calculator = Calculator()
        self.history = HistoryManager()
        self.lock = threading.Lock()

    def press(self, key):
        expression = self.calculator.current_expression
        repeated = key == "=" and self.calculator.last_result_displayed
        self.calculator.press(key)
        if key == "=" and not repeated and self.calculator.last_error is None:
            self.history.add_calculation(expression, self.calculator.get_result())

    def snapshot(self):
        calc = self.calculator
        return {
            'id': self.id,
            'expression': calc.current_expression,
            'display': calc.get_expression(),
            'result': calc.get_result(),
            'state': calc.state.value,
            'memory': calc.memory,
            'error': calc.last_error.kind if calc.last_error else None,
        }


# Initialize components (least recently used first)
sessions = OrderedDict()
sessions_lock = threading.Lock()


def _get_session(session_id):
    with sessions_lock:
        session = sessions.get(session_id)
        if session is not None:
            sessions.move_to_end(session_id)
        return session


def _not_found(session_id):
    return jsonify({'success': False, 'error': f"Unknown session: {session_id}"}), 404


def _bad_body():
    return jsonify({'success': False, 'error': "Request body must be a JSON object"}), 400


@app.route('/api')
def api_info():
    """API information page"""
    return f"""
    <html>
    <head><title>{config.APP_NAME} API</title></head>
    <body style="font-family: Arial; padding: 40px; background: #1a1a2e; color: white;">
        <h1>{config.APP_NAME} API Server</h1>
        <h2>Available Endpoints:</h2>
        <ul>
            <li>POST /api/evaluate - Evaluate an expression</li>
            <li>POST /api/sessions - Start a keypad session</li>
            <li>GET /api/sessions/&lt;id&gt; - Session display state</li>
            <li>POST /api/sessions/&lt;id&gt;/press - Press one or more keys</li>
            <li>GET /api/sessions/&lt;id&gt;/history?q= - Session calculation history (optional search)</li>
            <li>DELETE /api/sessions/&lt;id&gt; - End a session</li>
        </ul>
    </body>
    </html>
    """


@app.route('/api/evaluate', methods=['POST'])
def evaluate_expression():
    """Evaluate an expression without a session"""
    try:
        payload = request.get_json(silent=True)
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            return _bad_body()
        expression = payload.get('expression')
        if not isinstance(expression, str):
            return jsonify({'success': False, 'error': "'expression' must be a string"}), 400

        try:
            value = evaluator.evaluate(expression)
        except EvaluationError as e:
            return jsonify({
                'success': False,
                'error': config.ERROR_LABEL,
                'kind': e.kind,
                'message': str(e)
            }), 400

        return jsonify({
            'success': True,
            'data': {
                'expression': expression,
                'value': value,
                'display': evaluator.format_result(value)
            }
        })
    except Exception as e:
        logger.exception("Evaluate failed")
        return jsonify({'success': False, 'error': str(e)}), 500


@app.route('/api/sessions', methods=['POST'])
def create_session():
    """Start a new keypad session"""
    try:
        session = Session()
        with sessions_lock:
            while sessions and len(sessions) >= config.MAX_SESSIONS:
                dropped, _ = sessions.popitem(last=False)
                logger.info("Session %s dropped (limit %d)", dropped, config.MAX_SESSIONS)
            sessions[session.id] = session
        logger.info("Session %s started", session.id)
        return jsonify({'success': True, 'data': session.snapshot()}), 201
    except Exception as e:
        return jsonify({'success': False, 'error': str(e)}), 500


@app.route('/api/sessions/<session_id>', methods=['GET'])
def get_session(session_id):
    """Get the display state of a session"""
    session = _get_session(session_id)
    if session is None:
        return _not_found(session_id)
    with session.lock:
        return jsonify({'success': True, 'data': session.snapshot()})


@app.route('/api/sessions/<session_id>', methods=['DELETE'])
def delete_session(session_id):
    """End a session"""
    with sessions_lock:
        session = sessions.pop(session_id, None)
    if session is None:
        return _not_found(session_id)
    logger.info("Session %s ended", session_id)
    return jsonify({'success': True, 'data': {'id': session_id}})


@app.route('/api/sessions/<session_id>/press', methods=['POST'])
def press_keys(session_id):
    """Press a key ({"key": "7"}) or a sequence of keys ({"keys": ["7", "+"]})"""
    session = _get_session(session_id)
    if session is None:
        return _not_found(session_id)

    try:
        payload = request.get_json(silent=True)
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            return _bad_body()
        keys = payload['keys'] if 'keys' in payload else [payload.get('key')]
        if not isinstance(keys, list) or not all(isinstance(k, str) for k in keys):
            return jsonify({'success': False, 'error': "Expected 'key' or a list of 'keys'"}), 400

        with session.lock:
            for key in keys:
                try:
                    session.press(key)
                except ValueError as e:
                    return jsonify({
                        'success': False,
                        'error': str(e),
                        'data': session.snapshot()
                    }), 400
            return jsonify({'success': True, 'data': session.snapshot()})
    except Exception as e:
        logger.exception("Key press failed")
        return jsonify({'success': False, 'error': str(e)}), 500


@app.route('/api/sessions/<session_id>/history')
def get_history(session_id):
    """Get calculation history of a session, optionally filtered with ?q="""
    session = _get_session(session_id)
    if session is None:
        return _not_found(session_id)

    try:
        limit = int(request.args.get('limit', 50))
        keyword = request.args.get('q')
        with session.lock:
            if keyword:
                calculations = session.history.search_calculations(keyword)[:limit]
            else:
                calculations = session.history.get_calculation_history(limit)

        formatted = []
        for c in calculations:
            formatted.append({
                'expression': c[0],
                'result': c[1],
                'timestamp': c[2]
            })

        return jsonify({
            'success': True,
            'data': formatted,
            'count': len(formatted)
        })
    except ValueError as e:
        return jsonify({'success': False, 'error': str(e)}), 400


def run_server():
    """Start the portal on the configured host and port"""
    print("\n" + "="*60)
    print(f"{config.APP_NAME} Web Portal API Server")
    print("="*60)
    print(f"Server starting on http://{config.WEB_HOST}:{config.WEB_PORT}")
    print(f"Access from this device: http://localhost:{config.WEB_PORT}")
    if config.WEB_HOST == '0.0.0.0':
        print(f"Access from network: http://<your-ip>:{config.WEB_PORT}")
    print("="*60 + "\n")

    app.run(host=config.WEB_HOST, port=config.WEB_PORT, debug=False)


if __name__ == '__main__':
    from app_logging import setup_logging
    setup_logging()
    run_server()
