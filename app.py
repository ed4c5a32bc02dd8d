"""Flask web application for the matchmaking suggestion engine."""

import asyncio
import logging
import os

from flask import Flask, current_app, jsonify

from config import PROFILES_FILE, SUGGESTIONS_FILE
from src.services.matching_service import MatchingService
from src.services.profile_store import CustomerNotFoundError, JsonProfileStore, StoreError
from src.services.suggestion_store import JsonlSuggestionStore

logger = logging.getLogger(__name__)

# Overall budget for one suggestion request, in seconds
REQUEST_TIMEOUT = float(os.environ.get('SUGGESTION_REQUEST_TIMEOUT', 60))


def create_app(matching_service=None):
    """Build the Flask app around a MatchingService (JSON-file stores by default)."""
    app = Flask(__name__)
    app.config['MATCHING_SERVICE'] = matching_service or MatchingService(
        JsonProfileStore(PROFILES_FILE),
        JsonlSuggestionStore(SUGGESTIONS_FILE),
    )

    @app.errorhandler(CustomerNotFoundError)
    def handle_not_found(e):
        return jsonify({'error': str(e)}), 404

    @app.errorhandler(StoreError)
    def handle_store_error(e):
        logger.error("[api] store failure: %s", e)
        return jsonify({'error': 'Internal error'}), 500

    @app.route('/api/health')
    def health():
        return jsonify({'status': 'ok'})

    @app.route('/api/customers/<customer_id>/suggestions')
    def get_suggestions(customer_id):
        """Run suggestion generation and return the ranked list."""
        service = current_app.config['MATCHING_SERVICE']
        try:
            run = service.get_suggestions_sync(customer_id, timeout=REQUEST_TIMEOUT)
        except asyncio.TimeoutError:
            logger.error("[api] suggestions timed out customer=%s", customer_id)
            return jsonify({'error': 'Suggestion generation timed out'}), 504
        return jsonify({
            'success': True,
            'customerId': run.customer_id,
            'suggestions': [s.to_dict() for s in run.suggestions],
            'poolSize': run.pool_size,
            'fallbackCount': run.fallback_count,
        })

    @app.route('/api/customers/<customer_id>/suggestions/history')
    def get_suggestion_history(customer_id):
        """All stored suggestion records for a customer, oldest first."""
        service = current_app.config['MATCHING_SERVICE']
        records = service.history(customer_id)
        return jsonify({
            'success': True,
            'suggestions': [r.to_dict() for r in records],
        })

    return app


app = create_app()


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    if not os.environ.get('GEMINI_API_KEY') and not os.environ.get('GOOGLE_API_KEY'):
        print("Warning: GEMINI_API_KEY or GOOGLE_API_KEY environment variable not set (heuristic scoring only)")

    port = int(os.environ.get('PORT', 5000))
    app.run(debug=False, host='0.0.0.0', port=port)
