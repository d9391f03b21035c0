from flask import Blueprint, render_template, current_app
from flask_wtf.csrf import CSRFError

errors_bp = Blueprint("errors", __name__, template_folder="../../templates/errors")


@errors_bp.app_errorhandler(403)
def forbidden(error):
    return render_template("errors/403.html", page_title="Unauthorized"), 403


@errors_bp.app_errorhandler(404)
def page_not_found(error):
    return render_template("errors/404.html", page_title="Page Not Found"), 404


@errors_bp.app_errorhandler(500)
def internal_error(error):
    current_app.logger.error("Unhandled error: %s", getattr(error, "original_exception", error))
    return render_template("errors/500.html", page_title="Error!"), 500


@errors_bp.app_errorhandler(CSRFError)
def csrf_error(error):
    return render_template("errors/csrf.html", page_title="Form expired", reason=error.description), 400


@errors_bp.route("/500")
def get_500():
    return render_template("errors/500.html", page_title="Error!"), 500
