# userqr/blueprints/users/routes.py
"""
User routes - list, add, bulk add and detail views
"""

from flask import render_template, redirect, url_for, flash, request, current_app, jsonify

from userqr.constants import COUNTRIES, GENDERS, INTERESTS
from userqr.creation import create_one, create_many_random
from userqr.detail import DetailLoader
from userqr.errors import FetchError, RecordNotFound, ValidationError, WriteError
from userqr.pipeline import ListPipeline
from userqr.store import UserStore
from . import users_bp


def _origin():
    """Origin encoded into QR codes (PUBLIC_BASE_URL or the current host)."""
    return current_app.config.get('PUBLIC_BASE_URL') or request.host_url.rstrip('/')


def _list_url(pipeline):
    return url_for('users.index', **pipeline.query_args())


def _load_page():
    pipeline = ListPipeline.from_args(request.args)
    pipeline.load(UserStore())
    filtered = pipeline.apply_filters()
    return pipeline, filtered, pipeline.paginate(filtered)


# Routes
@users_bp.route('/')
def index():
    pipeline, filtered, page = _load_page()

    # every control links to the state its operation produces
    links = {
        'countries': [(value, label, _list_url(pipeline.copy().set_country_filter(value)))
                      for value, label in COUNTRIES],
        'clear_country': _list_url(pipeline.copy().clear_country_filter()),
        'clear_search': _list_url(pipeline.copy().set_search_term('')),
        'pages': [(n, _list_url(pipeline.copy().go_to_page(n)))
                  for n in range(1, page.total_pages + 1)],
        'prev': _list_url(pipeline.copy().go_to_page(page.number - 1)),
        'next': _list_url(pipeline.copy().go_to_page(page.number + 1)),
    }

    return render_template('user_list.html',
                           pipeline=pipeline,
                           page=page,
                           users=page.items,
                           filtered_count=len(filtered),
                           links=links)


@users_bp.route('/api/users')
def api_users():
    """JSON view of the same list pipeline (same query parameters as the list page)."""
    pipeline, filtered, page = _load_page()
    if pipeline.error:
        return jsonify({'success': False, 'error': pipeline.error}), 503
    return jsonify({
        'success': True,
        'users': [u.to_dict() for u in page.items],
        'page': page.number,
        'total_pages': page.total_pages,
        'total': page.total,
    })


@users_bp.route('/add', methods=['GET', 'POST'])
def add_user():
    if request.method == 'POST':
        try:
            user = create_one(UserStore(), request.form, _origin())
        except ValidationError as e:
            flash('Please correct the highlighted fields', 'warning')
            return render_template('user_form.html',
                                   form=request.form,
                                   selected_interests=request.form.getlist('interests'),
                                   errors=e.errors,
                                   genders=GENDERS,
                                   interests=INTERESTS), 400
        except WriteError:
            current_app.logger.exception('Error creating user')
            flash('Error creating user. Please try again.', 'danger')
            return redirect(url_for('users.add_user'))

        current_app.logger.info(f'User created via form: {user.id}')
        flash('User added successfully!', 'success')
        return redirect(url_for('users.index'))

    return render_template('user_form.html',
                           form={},
                           selected_interests=[],
                           errors={},
                           genders=GENDERS,
                           interests=INTERESTS)


@users_bp.route('/bulk-add', methods=['GET', 'POST'])
def bulk_add():
    count = current_app.config['BULK_USER_COUNT']
    if request.method == 'POST':
        try:
            created = create_many_random(UserStore(), _origin(), count=count,
                                         max_workers=current_app.config['BULK_CREATE_WORKERS'])
        except WriteError:
            current_app.logger.exception('Error adding random users')
            flash('Error adding random users. Please try again.', 'danger')
        else:
            current_app.logger.info(f'Random users created: {created}')
            flash(f'{created} Random users added successfully!', 'success')
        return redirect(url_for('users.bulk_add'))

    return render_template('bulk_add.html', count=count)


@users_bp.route('/user/<user_id>')
def user_detail(user_id):
    scanned = request.args.get('scanned') == 'true'
    loader = DetailLoader(UserStore())
    try:
        user = loader.fetch_and_maybe_increment(user_id, scanned=scanned)
    except RecordNotFound:
        flash('User not found', 'danger')
        return redirect(url_for('users.index'))
    except FetchError as e:
        current_app.logger.error(f'Loading user {user_id} failed: {e}')
        return render_template('user_detail.html', user=None, error=str(e)), 500

    return render_template('user_detail.html', user=user, error=None)
