from flask import Blueprint, jsonify
from guessfast.services.wordle import MAX_GUESSES, WORD_LENGTH

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({
        'message': 'Welcome to the GuessFast game server!',
        'word_length': WORD_LENGTH,
        'max_guesses': MAX_GUESSES,
    })
