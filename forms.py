from datetime import date, datetime, time
from decimal import Decimal

from flask import request
from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict
from wtforms import DecimalField, Field, SelectField, StringField
from wtforms.validators import DataRequired, Length, Optional, StopValidation

from errors import ValidationFailed
from models import CATEGORIES, CENT, MESSAGE_TYPES, TRANSACTION_TYPES

MIN_PRIVATE_KEY_LENGTH = 20
MAX_INTEGER_DIGITS = 13


def parse_datetime(value, end_of_day=False):
    """Parse an ISO-8601 date or datetime into a naive local datetime.

    A bare date becomes midnight, or the last instant of that day with ``end_of_day``.
    Returns None when the value cannot be parsed.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    value = value.strip()
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    if end_of_day and len(value) == 10:
        parsed = datetime.combine(date.fromisoformat(value), time.max)
    return parsed


def money(form, field):
    if field.process_errors:
        raise StopValidation()
    value = field.data
    if value is None:
        raise StopValidation('This field is required.')
    if not value.is_finite():
        raise StopValidation('Not a valid decimal value.')
    if value < 0:
        raise StopValidation('Amount cannot be negative.')
    if value.adjusted() >= MAX_INTEGER_DIGITS:
        raise StopValidation('Amount is too large.')
    if value != value.quantize(CENT):
        raise StopValidation('At most two decimal places are allowed.')


class TextField(StringField):
    """String field that refuses non-string JSON values."""

    def process_formdata(self, valuelist):
        if valuelist:
            value = valuelist[0]
            if value is None:
                self.data = None
                return
            if not isinstance(value, str):
                raise ValueError('Not a valid string.')
            self.data = value


class AmountField(DecimalField):
    def process_formdata(self, valuelist):
        if valuelist:
            value = valuelist[0]
            if isinstance(value, bool) or not isinstance(value, (str, int, Decimal)):
                raise ValueError('Not a valid decimal value.')
        super().process_formdata(valuelist)


class OccurredAtField(Field):
    def process_formdata(self, valuelist):
        if valuelist:
            self.data = parse_datetime(valuelist[0])
            if self.data is None:
                raise ValueError('Not a valid ISO-8601 date.')


class ApiForm(FlaskForm):
    class Meta:
        csrf = False


class RegisterForm(ApiForm):
    fullName = TextField(validators=[DataRequired(), Length(max=100)])
    monthlyTarget = AmountField(validators=[money])
    privateKey = TextField(validators=[
        DataRequired(),
        Length(min=MIN_PRIVATE_KEY_LENGTH, max=255,
               message=f'Private key must be at least {MIN_PRIVATE_KEY_LENGTH} characters.'),
    ])


class LoginForm(ApiForm):
    privateKey = TextField(validators=[DataRequired()])


class TransactionForm(ApiForm):
    amount = AmountField(validators=[money])
    type = SelectField(choices=list(TRANSACTION_TYPES))
    # Category is not cross-checked against type.
    category = SelectField(choices=list(CATEGORIES))
    description = TextField(validators=[Optional(), Length(max=500)])
    date = OccurredAtField(validators=[DataRequired()])


class ContactForm(ApiForm):
    contactWeyId = TextField(validators=[DataRequired(), Length(max=8)])
    contactName = TextField(validators=[DataRequired(), Length(max=100)])


class MessageForm(ApiForm):
    toWeyId = TextField(validators=[Optional()])
    content = TextField(validators=[DataRequired(), Length(max=2000)])
    messageType = SelectField(choices=list(MESSAGE_TYPES), default='text')


class DirectMessageForm(MessageForm):
    toWeyId = TextField(validators=[DataRequired(), Length(max=8)])


class BroadcastForm(ApiForm):
    content = TextField(validators=[DataRequired(), Length(max=2000)])


class GlobalMessageForm(BroadcastForm):
    userId = TextField(validators=[DataRequired()])


def validated(form_class):
    """Build ``form_class`` from the JSON body and validate it, or raise ValidationFailed."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationFailed('Request body must be a JSON object')
    # Pairs keep a JSON list as one value, so list-valued fields fail validation.
    form = form_class(formdata=MultiDict(list(payload.items())))
    if not form.validate():
        raise ValidationFailed(errors=form.errors)
    return form


def positive_int_arg(name, default, maximum=None):
    """Read an optional positive integer from the query string."""
    raw = request.args.get(name)
    if raw is None or raw == '':
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationFailed(errors={name: ['Must be a positive integer.']})
    if value < 1 or (maximum is not None and value > maximum):
        limit = f' no greater than {maximum}' if maximum is not None else ''
        raise ValidationFailed(errors={name: [f'Must be a positive integer{limit}.']})
    return value
