from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Wiki Desire Path presence server'})

@main.route('/health')
def health():
    stats = current_app.extensions['presence'].stats()
    return jsonify({'status': 'ok', **stats})
