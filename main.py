"""
Daily Word Game Server - Main Entry Point

This is the main entry point for the daily word game server.
It creates the Flask application, starts the end-of-day completion worker
and runs the server.
"""

import os

from daily_wordle import create_app
from daily_wordle.config import config
from daily_wordle.services import CompletionWorker, get_game_service
from daily_wordle.utils.game_logger import game_logger


def main():
    """Main function to initialize services and start the server."""
    config_class = config[os.getenv('APP_ENV', 'default')]

    try:
        print("Creating Flask application...")
        app = create_app(config_class)
        print("✓ Flask application created successfully")

        with app.app_context():
            game_service = get_game_service()

        worker = CompletionWorker(
            app.extensions['completion_scheduler'],
            game_service.mark_complete_if_unfinished,
            poll_seconds=app.config['COMPLETION_POLL_SECONDS'],
            retry_seconds=app.config['COMPLETION_RETRY_SECONDS'],
        )
        worker.start()
        print(f"✓ Completion worker started - checking every {worker.poll_seconds} seconds")

        game_logger.logger.info("Daily Word Server Starting")

        print(f"\nStarting Daily Word Game Server on {app.config['HOST']}:{app.config['PORT']}")
        print(f"Debug mode: {app.config['DEBUG']}")
        print(f"Game store: {app.config['GAME_STORE']}")
        print("=" * 50)

        # The reloader would start a second completion worker
        app.run(host=app.config['HOST'], port=app.config['PORT'], debug=app.config['DEBUG'], use_reloader=False)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Daily Word Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
