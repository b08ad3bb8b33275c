from django import template

from Painel.authorization.roles import PERMISSION_CONFIGS

register = template.Library()


@register.filter
def can(authz, rule):
    """``{% if authz|can:"delete:pedidos" %}``, optionally ``"update:pedidos:<establishment>"``."""
    if authz is None:
        return False
    parts = str(rule).split(":", 2)
    if len(parts) < 2:
        return False
    establishment_id = parts[2] if len(parts) == 3 and parts[2] else None
    return authz.can_perform_action(parts[0], parts[1], establishment_id)


@register.filter
def allowed(authz, permission_name):
    """``{% if authz|allowed:"STAFF_MANAGEMENT" %}``"""
    requirement = PERMISSION_CONFIGS.get(str(permission_name))
    if authz is None or requirement is None:
        return False
    return authz.has_permission(requirement)


@register.simple_tag
def can_act(authz, action, resource, establishment_id=None):
    """``{% can_act authz "update" "pedidos" order.codigo_estabelecimento as allowed %}``"""
    if authz is None:
        return False
    return authz.can_perform_action(action, resource, establishment_id or None)
