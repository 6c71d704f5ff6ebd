import os
from dotenv import load_dotenv
from sqlalchemy.engine import URL

from models import db

load_dotenv()


def database_uri():
    if os.getenv('MYSQL_HOST'):
        return URL.create(
            'mysql+mysqlconnector',
            username=os.getenv('MYSQL_USER'),
            password=os.getenv('MYSQL_PASSWORD'),
            host=os.getenv('MYSQL_HOST'),
            database=os.getenv('MYSQL_DATABASE', 'weywallet'),
        ).render_as_string(hide_password=False)
    # In-memory SQLite: data lives as long as the process.
    return os.getenv('DATABASE_URL', 'sqlite://')


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY')
    SQLALCHEMY_DATABASE_URI = database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    TRANSACTION_LIST_LIMIT = int(os.getenv('TRANSACTION_LIST_LIMIT', 50))
    CHAT_HISTORY_LIMIT = int(os.getenv('CHAT_HISTORY_LIMIT', 50))
    WEEKLY_STATS_WEEKS = int(os.getenv('WEEKLY_STATS_WEEKS', 4))
    MAX_WEEKLY_STATS_WEEKS = int(os.getenv('MAX_WEEKLY_STATS_WEEKS', 52))
    MAX_LIST_LIMIT = int(os.getenv('MAX_LIST_LIMIT', 500))
    AVERAGES_WINDOW_DAYS = int(os.getenv('AVERAGES_WINDOW_DAYS', 30))

    @staticmethod
    def init_db(app):
        db.init_app(app)
        with app.app_context():
            db.create_all()
