from flask import Blueprint, current_app, g, jsonify

from auth_utils import user_required
from errors import UnknownUser, ValidationFailed
from forms import (
    BroadcastForm, ContactForm, DirectMessageForm, GlobalMessageForm, MessageForm,
    positive_int_arg, validated,
)

chat_bp = Blueprint('chat', __name__, url_prefix='/api/chat')


def contact_json(contact):
    return {
        'id': contact.id,
        'contactName': contact.contact_name,
        'contactWeyId': contact.contact_wey_id,
        'createdAt': contact.created_at.isoformat(),
    }


def message_json(message):
    return {
        'id': message.id,
        'fromUserId': message.from_user_id,
        'toWeyId': message.to_wey_id,
        'content': message.content,
        'messageType': message.message_type,
        'isRead': message.is_read,
        'createdAt': message.created_at.isoformat(),
    }


def global_message_json(message, sender=None):
    return {
        'id': message.id,
        'content': message.content,
        'createdAt': message.created_at.isoformat(),
        'user': public_profile(sender) if sender is not None else None,
    }


def public_profile(user):
    return {'id': user.id, 'fullName': user.full_name, 'weyId': user.wey_id}


@chat_bp.route('/contacts/<user_id>', methods=['GET'])
def contacts(user_id):
    rows = current_app.storage.messaging.list_contacts(user_id)
    return jsonify([
        dict(
            contact_json(row['contact']),
            lastMessage=row['last_message'],
            lastMessageTime=row['last_message_time'].isoformat(),
            unreadCount=row['unread_count'],
        )
        for row in rows
    ])


@chat_bp.route('/contacts/<user_id>', methods=['POST'])
@user_required
def add_contact(user_id):
    form = validated(ContactForm)
    contact = current_app.storage.messaging.add_contact(
        user_id, form.contactWeyId.data, form.contactName.data
    )
    return jsonify({'message': 'Contact added', 'contact': contact_json(contact)})


@chat_bp.route('/contacts/<user_id>/<contact_id>', methods=['DELETE'])
def delete_contact(user_id, contact_id):
    current_app.storage.messaging.delete_contact(user_id, contact_id)
    return jsonify({'message': 'Contact deleted'})


@chat_bp.route('/messages/<user_id>/<handle>', methods=['GET'])
def conversation(user_id, handle):
    limit = positive_int_arg(
        'limit',
        current_app.config['CHAT_HISTORY_LIMIT'],
        maximum=current_app.config['MAX_LIST_LIMIT'],
    )
    messages = current_app.storage.messaging.list_conversation(user_id, handle, limit)
    return jsonify([
        dict(message_json(m), isFromCurrentUser=mine) for m, mine in messages
    ])


@chat_bp.route('/messages/<user_id>/<handle>', methods=['POST'])
@user_required
def send_message(user_id, handle):
    form = validated(MessageForm)
    if form.toWeyId.data and form.toWeyId.data != handle:
        raise ValidationFailed(errors={'toWeyId': ['Does not match the conversation.']})
    message = current_app.storage.messaging.send_direct(
        g.user.id, handle, form.content.data, form.messageType.data
    )
    return jsonify({'message': 'Message sent', 'chatMessage': message_json(message)})


@chat_bp.route('/messages/<user_id>', methods=['POST'])
@user_required
def send_message_to(user_id):
    form = validated(DirectMessageForm)
    message = current_app.storage.messaging.send_direct(
        g.user.id, form.toWeyId.data, form.content.data, form.messageType.data
    )
    return jsonify({'message': 'Message sent', 'chatMessage': message_json(message)})


@chat_bp.route('/messages/<user_id>/<handle>/read', methods=['POST'])
@user_required
def mark_read(user_id, handle):
    updated = current_app.storage.messaging.mark_read(user_id, handle)
    return jsonify({'message': 'Messages marked as read', 'updated': updated})


@chat_bp.route('/global', methods=['GET'])
def global_messages():
    limit = positive_int_arg(
        'limit',
        current_app.config['CHAT_HISTORY_LIMIT'],
        maximum=current_app.config['MAX_LIST_LIMIT'],
    )
    messages = current_app.storage.messaging.list_broadcast(limit)
    return jsonify([global_message_json(m, sender) for m, sender in messages])


@chat_bp.route('/global', methods=['POST'])
def send_global_message():
    form = validated(GlobalMessageForm)
    sender = current_app.storage.users.get_by_id(form.userId.data)
    if sender is None:
        raise UnknownUser()
    message = current_app.storage.messaging.send_broadcast(sender.id, form.content.data)
    return jsonify({
        'message': 'Message sent',
        'globalMessage': global_message_json(message, sender),
    })


@chat_bp.route('/global/<user_id>', methods=['POST'])
@user_required
def send_global_message_as(user_id):
    form = validated(BroadcastForm)
    message = current_app.storage.messaging.send_broadcast(g.user.id, form.content.data)
    return jsonify({
        'message': 'Message sent',
        'globalMessage': global_message_json(message, g.user),
    })
