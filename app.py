# app.py
# Flask application, built with the Application Factory pattern

import logging
import os

import click
from flask import Flask
from config import Config
from errors import register_error_handlers
from extensions import db, migrate

# Models must be imported here so that Alembic (Migrate) can see them
from models import (
    User, Competition, Submission, SubmissionVote,
    JuryMember, JuryScore, JuryScoringProgress, SubmissionVotingStats,
)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d - %(message)s',
    )
    logging.getLogger().setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # The default SQLite database lives in the instance folder
    os.makedirs(app.instance_path, exist_ok=True)

    db.init_app(app)
    migrate.init_app(app, db)

    from routes.auth import auth_bp
    from routes.main import main_bp
    from routes.jury import jury_bp
    from routes.admin import admin_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(main_bp)
    app.register_blueprint(jury_bp)
    app.register_blueprint(admin_bp)

    register_error_handlers(app)

    @app.cli.command('rebuild-jury-caches')
    def rebuild_jury_caches_command():
        """Recompute jury progress and submission voting stats."""
        from logic import rebuild_all_caches

        counts = rebuild_all_caches()
        click.echo(f"Rebuilt progress for {counts['jury_members']} jury members "
                   f"and stats for {counts['submissions']} submissions.")

    app.logger.info('Jury scoring app created (%s)', config_class.__name__)
    return app
