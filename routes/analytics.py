from flask import Blueprint, current_app, jsonify, request

from errors import ValidationFailed
from forms import parse_datetime, positive_int_arg
from routes.transactions import transaction_json

analytics_bp = Blueprint('analytics', __name__, url_prefix='/api/analytics')


@analytics_bp.route('/balance/<user_id>')
def balance(user_id):
    return jsonify(current_app.storage.analytics.balance(user_id))


@analytics_bp.route('/categories/<user_id>')
def categories(user_id):
    return jsonify(current_app.storage.analytics.category_distribution(user_id))


@analytics_bp.route('/transactions/<user_id>/range')
def transactions_in_range(user_id):
    start_raw = request.args.get('startDate')
    end_raw = request.args.get('endDate')
    if not start_raw or not end_raw:
        raise ValidationFailed('startDate and endDate are required')

    start = parse_datetime(start_raw)
    end = parse_datetime(end_raw, end_of_day=True)
    errors = {}
    if start is None:
        errors['startDate'] = ['Not a valid ISO-8601 date.']
    if end is None:
        errors['endDate'] = ['Not a valid ISO-8601 date.']
    if errors:
        raise ValidationFailed(errors=errors)

    transactions = current_app.storage.transactions.list_by_user_and_range(user_id, start, end)
    return jsonify([transaction_json(tx) for tx in transactions])


@analytics_bp.route('/weekly/<user_id>')
def weekly(user_id):
    weeks = positive_int_arg(
        'weeks',
        current_app.config['WEEKLY_STATS_WEEKS'],
        maximum=current_app.config['MAX_WEEKLY_STATS_WEEKS'],
    )
    stats = current_app.storage.analytics.weekly_stats(user_id, weeks)
    for bucket in stats:
        bucket['startDate'] = bucket['startDate'].isoformat()
        bucket['endDate'] = bucket['endDate'].isoformat()
    return jsonify(stats)


@analytics_bp.route('/averages/<user_id>')
def averages(user_id):
    return jsonify(current_app.storage.analytics.averages_by_category(
        user_id, current_app.config['AVERAGES_WINDOW_DAYS']
    ))


@analytics_bp.route('/monthly/<user_id>')
def monthly(user_id):
    return jsonify(current_app.storage.analytics.monthly_summary(user_id))
