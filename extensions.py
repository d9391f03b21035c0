from flask_compress import Compress
from flask_login import LoginManager
from flask_mail import Mail
from flask_migrate import Migrate
from flask_session import Session
from flask_sqlalchemy import SQLAlchemy
from flask_wtf.csrf import CSRFProtect

db = SQLAlchemy()
mail = Mail()
migrate = Migrate()
login_manager = LoginManager()
csrf = CSRFProtect()
compress = Compress()
server_session = Session()
