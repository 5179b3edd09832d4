# Overview: Flask extension instances shared by the models (users, devices, fault reports) and migrations.

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

db = SQLAlchemy()
migrate = Migrate()
