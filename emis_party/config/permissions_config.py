"""
Permissions and Roles Configuration
This config defines the permission matrix for the API's own resources and
the default roles built from it.
Used by the seed script to populate/update roles and permissions.
"""

from emis_party.modules.permissions.service import classify

# Define modules and their actions
MODULES = {
    "parties": {
        "resource": "parties",
        "actions": ["list", "create", "view", "edit", "delete"],
        "description": "Party (stakeholder) management"
    },
    "roles": {
        "resource": "roles",
        "actions": ["list", "create", "view", "edit", "delete", "assign"],
        "description": "Role management"
    },
    "permissions": {
        "resource": "permissions",
        "actions": ["list", "create", "view", "edit", "delete"],
        "description": "Permission management"
    }
}

# Role definitions per module
ROLE_TYPES = {
    "ADMIN": {
        "permissions": ["list", "create", "view", "edit", "delete"],
        "description": "Full administrative access to the module"
    },
    "VIEWER": {
        "permissions": ["list", "view"],
        "description": "Read-only access to the module"
    }
}

# Additional permissions for specific modules
MODULE_SPECIFIC_PERMISSIONS = {
    "roles": {
        "assign": "Assign roles to parties"
    }
}


def get_permission_matrix(role_type: str = "System"):
    """
    Returns a dictionary with all permissions and their associated roles
    Format: {
        "permissions": [
            {"resource": "Party", "action": "create", "description": "...", "wildcard": "Party:create"},
            ...
        ],
        "roles": [
            {
                "name": "Party Admin",
                "type": "System",
                "description": "...",
                "permissions": ["Party:create", "Party:delete", ...]
            },
            ...
        ]
    }
    """
    permissions = []
    roles = []

    for module_name, module_config in MODULES.items():
        resource = classify(module_config["resource"])

        for action in module_config["actions"]:
            description = f"{action.capitalize()} {module_config['resource']}"
            if action in MODULE_SPECIFIC_PERMISSIONS.get(module_name, {}):
                description = MODULE_SPECIFIC_PERMISSIONS[module_name][action]

            permissions.append({
                "resource": resource,
                "action": action,
                "description": description,
                "wildcard": f"{resource}:{action}"
            })

        for role_key, role_config in ROLE_TYPES.items():
            actions = [a for a in role_config["permissions"] if a in module_config["actions"]]

            # Admins also get module-specific actions
            if role_key == "ADMIN":
                actions += [a for a in module_config["actions"] if a not in actions]

            roles.append({
                "name": f"{resource} {role_key.capitalize()}",
                "type": role_type,
                "description": f"{role_config['description']} for {module_config['description']}",
                "permissions": sorted(f"{resource}:{a}" for a in actions)
            })

    return {
        "permissions": permissions,
        "roles": roles
    }


# Export the matrix for use in seed scripts
PERMISSION_MATRIX = get_permission_matrix()
