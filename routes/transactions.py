from flask import Blueprint, current_app, jsonify

from auth_utils import user_required
from forms import TransactionForm, positive_int_arg, validated

transactions_bp = Blueprint('transactions', __name__, url_prefix='/api/transactions')


def transaction_json(tx):
    return {
        'id': tx.id,
        'userId': tx.user_id,
        'amount': tx.amount,
        'type': tx.type,
        'category': tx.category,
        'description': tx.description,
        'date': tx.date.isoformat(),
        'createdAt': tx.created_at.isoformat(),
    }


@transactions_bp.route('/<user_id>', methods=['GET'])
def index(user_id):
    limit = positive_int_arg(
        'limit',
        current_app.config['TRANSACTION_LIST_LIMIT'],
        maximum=current_app.config['MAX_LIST_LIMIT'],
    )
    transactions = current_app.storage.transactions.list_by_user(user_id, limit)
    return jsonify([transaction_json(tx) for tx in transactions])


@transactions_bp.route('/<user_id>', methods=['POST'])
@user_required
def add_transaction(user_id):
    form = validated(TransactionForm)
    tx = current_app.storage.transactions.insert(
        user_id,
        type=form.type.data,
        category=form.category.data,
        amount=form.amount.data,
        date=form.date.data,
        description=form.description.data,
    )
    return jsonify({'message': 'Transaction added', 'transaction': transaction_json(tx)})


@transactions_bp.route('/<user_id>/<tx_id>', methods=['DELETE'])
def delete_transaction(user_id, tx_id):
    current_app.storage.transactions.delete(tx_id, user_id)
    return jsonify({'message': 'Transaction deleted'})
