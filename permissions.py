# permissions.py
# Which capabilities each user role grants. Jury rights are not a role:
# they come from an active JuryMember row (see jury_service.is_jury_member).

ROLE_CAPABILITIES = {
    'ADMIN': frozenset({
        'manage_jury',
        'view_jury_progress',
        'rebuild_caches',
        'announce_winners',
        'moderate',
        'vote',
    }),
    'MODERATOR': frozenset({
        'view_jury_progress',
        'moderate',
        'vote',
    }),
    'MEMBER': frozenset({
        'vote',
    }),
}


def capabilities_for(role):
    return ROLE_CAPABILITIES.get((role or '').upper(), frozenset())


def has_capability(role, capability):
    return capability in capabilities_for(role)
