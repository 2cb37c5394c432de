from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the tankbot game server!'})

@main.route('/api/channels')
def list_channels():
    manager = current_app.extensions['tankbot']
    return jsonify({'channels': manager.active_channels()})
