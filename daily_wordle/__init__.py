"""
Daily Word Game Server Application Package

A daily word-guessing game served as a JSON API. Each user gets one game per
calendar day; guesses are scored letter by letter and games close at the end
of their day.
"""

from flask import Flask
from flask_cors import CORS
from pymongo.mongo_client import MongoClient

from .config import Config


def create_app(config_class=Config, database=None):
    """
    Application factory pattern for creating Flask app instances.

    Args:
        config_class: Configuration class to use
        database: Optional pymongo Database; when omitted a client is
            created from ``MONGO_URI``

    Returns:
        Flask application instance with all services initialized
    """
    from .services import (
        AuthService, GameService, InMemoryGameRepository, InMemoryJobStore,
        MongoGameRepository, MongoJobStore, WordDictionary,
    )

    app = Flask(__name__)
    app.config.from_object(config_class)

    if database is None:
        client = MongoClient(app.config['MONGO_URI'])
        database = client[app.config['MONGO_DB_NAME']]

    if app.config.get('GAME_STORE') == 'memory':
        repository = InMemoryGameRepository()
        scheduler = InMemoryJobStore()
    else:
        repository = MongoGameRepository(database)
        scheduler = MongoJobStore(database)

    dictionary = WordDictionary.from_file(app.config.get('WORD_BANK_PATH'))

    app.extensions['word_dictionary'] = dictionary
    app.extensions['completion_scheduler'] = scheduler
    app.extensions['game_service'] = GameService(repository, scheduler, dictionary)
    app.extensions['auth_service'] = AuthService(
        database, app.config['JWT_SECRET'], app.config.get('JWT_EXPIRATION_DAYS', 7)
    )

    # Initialize extensions
    CORS(app)

    # Register blueprints
    from .controllers.auth_controller import auth_bp
    from .controllers.game_controller import game_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(game_bp, url_prefix='/api')

    return app
