from flask import Blueprint, request, redirect, url_for, render_template
import logging

from flatcms.core.context import with_context
from flatcms.core.errors import AuthError, ConflictError, ValidationError

auth_bp = Blueprint('auth', __name__)
logger = logging.getLogger(__name__)


@auth_bp.route('/')
@with_context
def landing(ctx):
    if ctx.signed_in:
        return redirect(url_for('documents.index'))
    return render_template('sign_in.html')


@auth_bp.route('/sign_out', methods=['POST'])
@with_context
def sign_out(ctx):
    ctx.sign_out()
    ctx.success('You have been signed out')
    return redirect(url_for('auth.landing'))


@auth_bp.route('/sign_in_form')
def sign_in_form():
    return render_template('sign_in_form.html')


@auth_bp.route('/sign_in_form', methods=['POST'])
@with_context
def sign_in(ctx):
    username = request.form.get('username', '')
    password = request.form.get('password', '')

    try:
        ctx.sign_in(ctx.credentials.authenticate(username, password))
    except AuthError as e:
        logger.warning(f"Failed sign-in for {username!r}")
        return render_template('sign_in_form.html', error=e.message, username=username), e.status_code

    ctx.success('Welcome!')
    return redirect(url_for('documents.index'))


@auth_bp.route('/sign_up')
def sign_up_form():
    return render_template('sign_up.html')


@auth_bp.route('/sign_up', methods=['POST'])
@with_context
def sign_up(ctx):
    username = request.form.get('username', '')
    password = request.form.get('password', '')

    try:
        ctx.credentials.create(username, password)
    except ValidationError as e:
        logger.warning(f"Sign-up rejected: {e.message}")
        return render_template('sign_up.html', error=e.message, username=username), e.status_code
    except ConflictError as e:
        ctx.error(e.message)
        return redirect(url_for('auth.sign_up_form'))

    ctx.success(f"Thanks for signing up {username}! Now you can sign in!")
    return redirect(url_for('auth.sign_in_form'))
