"""
Document routes: listing, create, upload, view, edit, rename, duplicate
and delete. Every route requires a signed-in session.

A missing target raises NotFoundError from the store; the app-level
handler turns that into a flash message and a redirect to the listing.
"""

from flask import Blueprint, Response, request, redirect, url_for, render_template
import logging
import mimetypes

from flatcms.core.context import login_required
from flatcms.core.errors import ConflictError
from flatcms.core.filenames import (
    DocumentKind, Purpose, downcase_ext, ext_name, invalid_string,
    next_available_name, split_base_ext, validate,
)
from flatcms.core.renderer import render_markdown

documents_bp = Blueprint('documents', __name__)
logger = logging.getLogger(__name__)


def _to_index():
    return redirect(url_for('documents.index'))


def _normalize_newlines(text: str) -> str:
    # Browsers submit textarea content with CRLF line endings
    return text.replace('\r\n', '\n')


def _not_editable(filename: str):
    kind = DocumentKind.from_filename(filename)
    if kind is not None and kind.editable:
        return None
    ext = ext_name(filename)
    return f"{ext} files can't be edited" if ext else f'"{filename}" can\'t be edited'


@documents_bp.route('/favicon.ico')
def favicon():
    return '', 204


@documents_bp.route('/index')
@login_required
def index(ctx):
    files = [
        {'filename': name, 'kind': DocumentKind.from_filename(name)}
        for name in ctx.store.list()
    ]
    logger.debug(f"Index: {len(files)} documents")
    return render_template('index.html', files=files)


@documents_bp.route('/new')
@login_required
def new(ctx):
    return render_template('new.html')


@documents_bp.route('/create', methods=['POST'])
@login_required
def create(ctx):
    filename = request.form.get('filename', '')
    reason = validate(filename, Purpose.CREATE, ctx.store.list())
    if reason:
        logger.warning(f"Create rejected for {filename!r}: {reason}")
        return render_template('new.html', error=reason, filename=filename), 422

    filename = downcase_ext(filename)
    ctx.store.create(filename)
    ctx.success(f'"{filename}" has been created!')
    return _to_index()


@documents_bp.route('/<filename>/duplicate')
@login_required
def duplicate(ctx, filename):
    try:
        copy_name = ctx.store.duplicate(filename)
    except ConflictError as e:
        ctx.error(e.message)
        return _to_index()

    ctx.success(f'"{copy_name}" has been created!')
    return _to_index()


@documents_bp.route('/upload')
@login_required
def upload_form(ctx):
    return render_template('upload.html')


@documents_bp.route('/upload', methods=['POST'])
@login_required
def upload(ctx):
    uploaded = request.files.get('myfile')
    if uploaded is None or not uploaded.filename:
        return render_template('upload.html', error='Please choose a file to upload'), 422

    reason = validate(uploaded.filename, Purpose.UPLOAD)
    if reason:
        logger.warning(f"Upload rejected for {uploaded.filename!r}: {reason}")
        return render_template('upload.html', error=reason), 422

    filename = next_available_name(downcase_ext(uploaded.filename), ctx.store.list())
    ctx.store.write(filename, uploaded.read())
    logger.info(f"Uploaded {uploaded.filename!r} as {filename!r}")
    ctx.success('Your file has been uploaded successfully!')
    return _to_index()


@documents_bp.route('/<filename>/edit')
@login_required
def edit(ctx, filename):
    reason = _not_editable(filename)
    if reason:
        ctx.error(reason)
        return _to_index()

    content = ctx.store.read(filename).decode('utf-8', errors='replace')
    filename = ctx.store.stored_name(filename)
    ctx.remember_edit(filename, content)
    return render_template('edit.html', filename=filename, content=content)


@documents_bp.route('/<filename>', methods=['POST'])
@login_required
def update(ctx, filename):
    reason = _not_editable(filename)
    if reason:
        ctx.error(reason)
        return _to_index()

    filename = ctx.store.stored_name(filename)
    content = _normalize_newlines(request.form.get('content', ''))
    ctx.store.write(filename, content)

    if ctx.edit_unchanged(filename, content):
        ctx.success(f'"{filename}" was unchanged')
    else:
        ctx.success(f'"{filename}" has been updated')
    return _to_index()


@documents_bp.route('/<filename>')
@login_required
def view(ctx, filename):
    content = ctx.store.read(filename)
    filename = ctx.store.stored_name(filename)
    kind = DocumentKind.from_filename(filename)

    if kind is DocumentKind.MARKDOWN:
        html = render_markdown(content.decode('utf-8', errors='replace'))
        return render_template('view.html', filename=filename, content=html)
    if kind is DocumentKind.TEXT:
        return Response(content, mimetype='text/plain')
    if kind is DocumentKind.IMAGE:
        mimetype = mimetypes.guess_type(filename)[0] or 'application/octet-stream'
        return Response(content, mimetype=mimetype)
    return Response(content, mimetype='application/octet-stream')


@documents_bp.route('/<filename>/delete', methods=['POST'])
@login_required
def delete(ctx, filename):
    filename = ctx.store.stored_name(filename)
    ctx.store.delete(filename)
    ctx.success(f'"{filename}" has been deleted')
    return _to_index()


@documents_bp.route('/<filename>/rename')
@login_required
def rename_form(ctx, filename):
    filename = ctx.store.stored_name(filename)
    title, ext = split_base_ext(downcase_ext(filename))
    ctx.remember_rename_extension(filename, ext)
    return render_template('rename.html', filename=filename, title=title, extension=ext)


@documents_bp.route('/<filename>/rename', methods=['POST'])
@login_required
def rename(ctx, filename):
    old_name = ctx.store.stored_name(filename)
    ext = ctx.take_rename_extension(old_name)
    if ext is None:
        ext = ext_name(old_name)

    title = request.form.get('title', '')
    if ext and title.lower().endswith(ext) and len(title) > len(ext):
        title = title[:-len(ext)]
    new_name = title + ext

    reason = invalid_string(title) or validate(new_name, Purpose.RENAME)
    if reason:
        logger.warning(f"Rename of {old_name!r} rejected: {reason}")
        ctx.remember_rename_extension(old_name, ext)
        return render_template('rename.html', filename=old_name, title=title, extension=ext, error=reason), 422

    try:
        ctx.store.rename(old_name, new_name)
    except ConflictError as e:
        ctx.error(e.message)
        return redirect(url_for('documents.rename_form', filename=old_name))

    ctx.success(f'"{old_name}" is renamed to "{new_name}"')
    return _to_index()
