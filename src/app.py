"""
Flask web application for the ladder bracket engine.
"""
import io
import os

from flask import Flask, Response, jsonify, request

from bracket.champion import poster_payload
from bracket.double_elimination import describe_round
from bracket.errors import BracketError, RecognitionServiceError, UnknownEntrant
from bracket.models import Format, Slot
from bracket.progression import is_playable
from bracket.recognition import RecognitionClient, interpret_result_text
from bracket.reporting import report_filename, report_row_for, write_report_csv
from bracket.storage import TournamentStore
from bracket.tournament import champion, create_tournament, declare_winner

app = Flask(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.environ.get('TOURNAMENT_DATA_DIR', os.path.join(BASE_DIR, 'data'))
RECOGNITION_SERVICE_URL = os.environ.get('RECOGNITION_SERVICE_URL')
RECOGNITION_TIMEOUT = float(os.environ.get('RECOGNITION_TIMEOUT', '30'))
MAX_UPLOAD_SIZE = 10 * 1024 * 1024  # 10 MB


def _get_or_create_secret_key() -> bytes:
    """Get SECRET_KEY from env, or generate and persist to file."""
    env_key = os.environ.get('SECRET_KEY')
    if env_key:
        return env_key.encode()
    key_file = os.path.join(DATA_DIR, '.secret_key')
    if os.path.exists(key_file):
        with open(key_file, 'rb') as f:
            return f.read()
    key = os.urandom(24)
    os.makedirs(DATA_DIR, exist_ok=True)
    with open(key_file, 'wb') as f:
        f.write(key)
    return key


app.secret_key = _get_or_create_secret_key()
app.config['MAX_CONTENT_LENGTH'] = MAX_UPLOAD_SIZE


def get_store() -> TournamentStore:
    return TournamentStore(DATA_DIR)


def get_recognition_client():
    if not RECOGNITION_SERVICE_URL:
        return None
    return RecognitionClient(RECOGNITION_SERVICE_URL, timeout=RECOGNITION_TIMEOUT)


@app.errorhandler(BracketError)
def handle_bracket_error(e):
    status = 404 if isinstance(e, UnknownEntrant) else 400
    return jsonify({'error': str(e)}), status


def _parse_score(value):
    """Score from a JSON/form value: int, or None when blank."""
    if value is None or value == '':
        return None
    score = int(value)
    if score < 0:
        raise ValueError('negative score')
    return score


def _tournament_payload(tournament):
    data = tournament.to_dict()
    for match_data, match in zip(data['matches'], tournament.matches):
        match_data['round_name'] = describe_round(match, tournament.matches)
        match_data['playable'] = is_playable(tournament.matches, match)
    winner = champion(tournament)
    data['champion'] = winner.display_name if winner else None
    return data


def _record_result(store, tournament, match_id, slot, score_a=None, score_b=None):
    """Apply a result, persist it, and append a report row when reporting is on."""
    updated = declare_winner(tournament, match_id, slot, score_a, score_b)
    store.save_tournament(updated)

    settings = store.load_settings()
    if settings.get('report_results'):
        row = report_row_for(updated, updated.match(match_id))
        if row:
            rows = store.load_report_rows()
            rows.append(row)
            store.save_report_rows(rows)

    decided = updated.match(match_id)
    app.logger.info(f'{decided.winner.display_name} advances from {match_id} in {updated.name}')
    return updated


def _load_tournament_or_404(store):
    tournament = store.load_tournament()
    if tournament is None:
        return None, (jsonify({'error': 'No tournament has been started'}), 404)
    return tournament, None


@app.route('/api/roster', methods=['GET'])
def api_get_roster():
    store = get_store()
    return jsonify({'entrants': store.load_roster().to_list()})


@app.route('/api/roster', methods=['POST'])
def api_add_entrant():
    """Add an entrant by name. Names are unique case-insensitively."""
    data = request.get_json(silent=True) or {}
    name = (data.get('name') or '').strip()
    if not name:
        return jsonify({'error': 'Missing entrant name'}), 400

    store = get_store()
    with store.lock:
        roster = store.load_roster()
        try:
            entrant = roster.add(name)
        except ValueError as e:
            return jsonify({'error': str(e)}), 400
        store.save_roster(roster)

    return jsonify({'success': True, 'entrant': entrant.to_dict(), 'count': len(roster)}), 201


@app.route('/api/roster/<entrant_id>', methods=['DELETE'])
def api_remove_entrant(entrant_id):
    store = get_store()
    with store.lock:
        roster = store.load_roster()
        removed = roster.remove(entrant_id)
        store.save_roster(roster)
    return jsonify({'success': True, 'removed': removed.to_dict(), 'count': len(roster)})


@app.route('/api/tournament', methods=['GET'])
def api_get_tournament():
    store = get_store()
    tournament, error = _load_tournament_or_404(store)
    if error:
        return error
    return jsonify(_tournament_payload(tournament))


@app.route('/api/tournament', methods=['POST'])
def api_create_tournament():
    """Randomise the roster and build a new bracket, replacing any current one."""
    data = request.get_json(silent=True) or {}
    store = get_store()
    with store.lock:
        settings = store.load_settings()
        name = (data.get('name') or settings['tournament_name']).strip()
        try:
            format = Format(data.get('format') or settings['format'])
        except ValueError:
            return jsonify({'error': "Format must be 'single' or 'double'"}), 400

        roster = store.load_roster()
        tournament = create_tournament(roster.snapshot(), name=name, format=format)
        store.save_tournament(tournament)
        store.save_report_rows([])

        settings.update({'tournament_name': tournament.name, 'format': format.value})
        store.save_settings(settings)

    app.logger.info(f'Built {format.value} elimination bracket "{tournament.name}" '
                    f'with {len(tournament.entrants)} entrants')
    return jsonify(_tournament_payload(tournament)), 201


@app.route('/api/matches/<match_id>/winner', methods=['POST'])
def api_declare_winner(match_id):
    """Declare the winner of a match by slot ('a' or 'b'), with optional scores."""
    data = request.get_json(silent=True) or {}
    try:
        slot = Slot(str(data.get('slot', '')).lower())
    except ValueError:
        return jsonify({'error': "Slot must be 'a' or 'b'"}), 400
    try:
        score_a = _parse_score(data.get('score_a'))
        score_b = _parse_score(data.get('score_b'))
    except (TypeError, ValueError):
        return jsonify({'error': 'Scores must be whole numbers'}), 400

    store = get_store()
    with store.lock:
        tournament, error = _load_tournament_or_404(store)
        if error:
            return error
        updated = _record_result(store, tournament, match_id, slot, score_a, score_b)

    return jsonify(_tournament_payload(updated))


@app.route('/api/matches/<match_id>/recognize', methods=['POST'])
def api_recognize_result(match_id):
    """
    Read a match result from a photo (multipart 'image') or from already
    recognised text (JSON 'text').

    The winner is only applied when 'apply' is set and the text named one side
    unambiguously; otherwise the response asks for a manual decision.
    """
    store = get_store()
    tournament, error = _load_tournament_or_404(store)
    if error:
        return error
    match = tournament.match(match_id)
    if match is None:
        return jsonify({'error': f'No match {match_id}'}), 404

    image = request.files.get('image')
    if image is not None:
        client = get_recognition_client()
        if client is None:
            return jsonify({'error': 'Recognition service is not configured'}), 503
        try:
            text = client.recognize(image.read(), image.filename or 'match.jpg')
        except RecognitionServiceError as e:
            app.logger.warning(f'Recognition failed for {match_id}: {e}')
            return jsonify({'error': 'Failed to process the image'}), 502
        apply = request.form.get('apply', '').lower() in ('1', 'true', 'yes')
    else:
        data = request.get_json(silent=True) or {}
        text = data.get('text') or ''
        apply = bool(data.get('apply'))

    result = interpret_result_text(text, match.slot_a, match.slot_b)
    response = {
        'match_id': match_id,
        'score_a': result.score_a,
        'score_b': result.score_b,
        'winning_slot': result.winning_slot.value if result.winning_slot else None,
        'ambiguous': result.ambiguous,
        'applied': False,
    }
    if result.ambiguous:
        response['message'] = "Couldn't confidently read the result. Pick a winner manually."
        return jsonify(response)

    if apply:
        with store.lock:
            current = store.load_tournament()
            if current is None:
                return jsonify({'error': 'No tournament has been started'}), 404
            updated = _record_result(store, current, match_id, result.winning_slot,
                                     result.score_a, result.score_b)
        response['applied'] = True
        response['tournament'] = _tournament_payload(updated)
    return jsonify(response)


@app.route('/api/reset', methods=['POST'])
def api_reset():
    """Discard the bracket and report rows; keep the roster."""
    store = get_store()
    with store.lock:
        store.reset(keep_roster=True)
    app.logger.info('Tournament reset, roster kept')
    return jsonify({'success': True})


@app.route('/api/clear', methods=['POST'])
def api_clear():
    """Discard the bracket, report rows and roster."""
    store = get_store()
    with store.lock:
        store.reset(keep_roster=False)
    app.logger.info('Tournament and roster cleared')
    return jsonify({'success': True})


@app.route('/api/champion', methods=['GET'])
def api_champion():
    store = get_store()
    winner = champion(store.load_tournament())
    return jsonify({'champion': winner.to_dict() if winner else None})


@app.route('/api/poster', methods=['GET'])
def api_poster():
    """Data for the champion poster renderer."""
    store = get_store()
    tournament, error = _load_tournament_or_404(store)
    if error:
        return error
    payload = poster_payload(tournament)
    if payload is None:
        return jsonify({'error': 'No champion yet'}), 404
    return jsonify(payload)


@app.route('/api/report', methods=['GET'])
def api_report():
    store = get_store()
    return jsonify({'rows': [row.to_dict() for row in store.load_report_rows()]})


@app.route('/api/export/report-csv')
def api_export_report_csv():
    """Export recorded results as a downloadable CSV file."""
    store = get_store()
    rows = store.load_report_rows()
    if not rows:
        return jsonify({'success': False, 'error': 'No matches to export yet'}), 404

    output = io.StringIO()
    write_report_csv(rows, output)
    csv_content = output.getvalue()
    output.close()

    return Response(
        csv_content,
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={report_filename(rows[0].tournament_name)}'},
    )


@app.route('/api/settings', methods=['GET'])
def api_get_settings():
    return jsonify(get_store().load_settings())


@app.route('/api/settings', methods=['POST'])
def api_update_settings():
    """Update tournament name, default format and result reporting."""
    data = request.get_json(silent=True) or {}
    store = get_store()
    with store.lock:
        settings = store.load_settings()
        if 'tournament_name' in data:
            name = str(data['tournament_name']).strip()
            if not name:
                return jsonify({'error': 'Tournament name cannot be empty'}), 400
            settings['tournament_name'] = name
        if 'format' in data:
            if data['format'] not in (Format.SINGLE.value, Format.DOUBLE.value):
                return jsonify({'error': "Format must be 'single' or 'double'"}), 400
            settings['format'] = data['format']
        if 'report_results' in data:
            settings['report_results'] = bool(data['report_results'])
        store.save_settings(settings)
    return jsonify(settings)


if __name__ == '__main__':
    app.run(debug=os.environ.get('FLASK_DEBUG') == '1')
