# Overview: Shared extension instances; bound to the app in create_app().

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

# Models, services and the CLI import `db` from here
db = SQLAlchemy()
migrate = Migrate()
