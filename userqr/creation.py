"""
Create flows: single user from the form and bulk random generation.

Creation is two-phase. The user row is inserted first because the QR code
encodes its id; the code is generated and attached by a follow-up update. If
that second phase fails the user stays in the store without a code. Nothing
reconciles such users later.
"""

import logging
import random
import re
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import date, timedelta

from flask import current_app, has_app_context

from models import ImageState
from utils import parse_bool, parse_date
from . import codes
from .constants import COUNTRY_VALUES, GENDERS, INTERESTS
from .errors import BulkCreateError, ImageAttachError, ValidationError

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r'^[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}$', re.IGNORECASE)
PHONE_RE = re.compile(r'^[0-9+-]+$')

# Generated addresses are kept to a fixed width: local part + '@' + domain
EMAIL_MAX_LENGTH = 18

REQUIRED_MESSAGES = {
    'name': 'Name is required',
    'email': 'Email is required',
    'phone': 'Phone number is required',
    'address': 'Address is required',
    'gender': 'Please select a gender',
    'dob': 'Date of birth is required',
    'occupation': 'Occupation is required',
    'country': 'Please select a country',
}


def _form_list(form, key):
    if hasattr(form, 'getlist'):
        return [v for v in form.getlist(key) if v]
    value = form.get(key) or []
    if isinstance(value, str):
        return [value] if value else []
    return list(value)


def validate_user_form(form):
    """
    Check submitted form fields and return the values to insert.

    Args:
        form: request.form or any mapping of field name to value

    Returns:
        dict of normalized user fields

    Raises:
        ValidationError: with one message per failing field
    """
    values = {k: (form.get(k) or '').strip() for k in REQUIRED_MESSAGES}
    errors = {k: msg for k, msg in REQUIRED_MESSAGES.items() if not values[k]}

    if 'name' not in errors and len(values['name']) < 2:
        errors['name'] = 'Name must be at least 2 characters'
    if 'email' not in errors and not EMAIL_RE.match(values['email']):
        errors['email'] = 'Invalid email address'
    if 'phone' not in errors and not PHONE_RE.match(values['phone']):
        errors['phone'] = 'Invalid phone number'
    if 'address' not in errors and len(values['address']) < 5:
        errors['address'] = 'Address must be at least 5 characters'
    if 'gender' not in errors and values['gender'] not in GENDERS:
        errors['gender'] = 'Please select a gender'
    if 'country' not in errors and values['country'] not in COUNTRY_VALUES:
        errors['country'] = 'Please select a country'
    if 'dob' not in errors:
        dob = parse_date(values['dob'])
        if dob is None:
            errors['dob'] = 'Date of birth must be a valid date'
        else:
            values['dob'] = dob.isoformat()

    interests = _form_list(form, 'interests')
    if any(i not in INTERESTS for i in interests):
        errors['interests'] = 'Unknown interest selected'

    if errors:
        raise ValidationError(errors)

    values['interests'] = list(dict.fromkeys(interests))
    newsletter = form.get('newsletter')
    values['newsletter'] = newsletter if isinstance(newsletter, bool) else parse_bool(newsletter)
    return values


def attach_code_image(store, user, origin, encode=codes.encode):
    """Phase 2: encode the user's scan link and store it on the user."""
    if user.image_state is ImageState.IMAGE_ATTACHED:
        return user
    user_id = user.id
    try:
        url = encode(codes.scan_url(origin, user_id))
        store.update(user_id, {'qr_code_url': url})
    except Exception as e:
        logger.exception('Attaching QR code to user %s failed', user_id)
        raise ImageAttachError(f'User {user_id} was created without a QR code: {e}', user=user) from e
    return user


def create_one(store, form, origin, encode=codes.encode):
    """Validate, insert, then attach the QR code. The store is not touched on invalid input."""
    fields = validate_user_form(form)
    user = store.create(fields)
    logger.info('User created: %s', user.id)
    return attach_code_image(store, user, origin, encode)


# Word lists for synthetic users
first_names = ["James", "Mary", "John", "Linda", "Robert", "Olena", "Andrii", "Maria", "Kenji", "Aiko", "Lucas", "Emma"]
last_names = ["Smith", "Johnson", "Brown", "Garcia", "Shevchenko", "Kovalchuk", "Tanaka", "Muller", "Martin", "Silva"]
streets = ["Main St", "Oak Avenue", "Maple Road", "Park Lane", "Station Road", "Khreshchatyk St", "High Street"]
occupations = ["Software Engineer", "Teacher", "Nurse", "Accountant", "Designer", "Electrician", "Chef", "Lawyer", "Pharmacist"]
email_domains = ["gmail.com", "yahoo.com", "mail.com", "example.org", "proton.me", "outlook.com"]


def random_email(rng, first, last):
    domain = rng.choice(email_domains)
    local = f"{first}.{last}{rng.randint(1, 999)}".lower()
    local = local[:max(0, EMAIL_MAX_LENGTH - len(domain) - 1)]
    return f"{local}@{domain}"


def random_dob(rng, min_age=18, max_age=65, today=None):
    today = today or date.today()
    days = rng.randint(int(min_age * 365.25), int(max_age * 365.25))
    return (today - timedelta(days=days)).isoformat()


def generate_random_user(rng=None):
    rng = rng or random.Random()
    first = rng.choice(first_names)
    last = rng.choice(last_names)
    return {
        'name': f"{first} {last}",
        'email': random_email(rng, first, last),
        'phone': ''.join(rng.choice('0123456789') for _ in range(10)),
        'address': f"{rng.randint(1, 9999)} {rng.choice(streets)}",
        'gender': rng.choice(GENDERS),
        'dob': random_dob(rng),
        'occupation': rng.choice(occupations),
        'interests': rng.sample(INTERESTS, 2),
        'newsletter': rng.random() < 0.5,
        'country': rng.choice(COUNTRY_VALUES),
    }


def _create_two_phase(store, fields, origin, encode):
    user = store.create(fields)
    attach_code_image(store, user, origin, encode)
    return user.id


def create_many_random(store, origin, count=10, max_workers=None, rng=None, encode=codes.encode):
    """
    Create ``count`` random users concurrently and wait for all of them.

    Each user goes through the same two-phase sequence as ``create_one``.
    Failures are reported in aggregate: if any pipeline fails, BulkCreateError
    is raised after every pipeline has finished. Users that were written stay.

    Returns:
        number of users created
    """
    if count <= 0:
        return 0
    rng = rng or random.Random()
    payloads = [generate_random_user(rng) for _ in range(count)]
    app = current_app._get_current_object() if has_app_context() else None

    def pipeline(fields):
        if app is None:
            return _create_two_phase(store, fields, origin, encode)
        with app.app_context():
            return _create_two_phase(store, fields, origin, encode)

    errors = []
    with ThreadPoolExecutor(max_workers=min(max_workers or count, count)) as executor:
        futures = [executor.submit(pipeline, fields) for fields in payloads]
        for future in as_completed(futures):
            try:
                future.result()
            except Exception as e:
                logger.error(f"Random user creation failed: {e}")
                errors.append(e)

    if errors:
        raise BulkCreateError(
            f'{len(errors)} of {count} random users could not be created',
            failed=len(errors), total=count,
        ) from errors[0]
    logger.info('Created %d random users', count)
    return count
