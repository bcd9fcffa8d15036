"""
Pydantic schema definitions for API payloads.

Each domain (dancers, studios, events, entries, scores, ...) defines its
own request and response models.  All of them derive from
``base.ApiModel`` so that JSON bodies use camelCase field names
(``eodsaId``, ``dateOfBirth``) while Python code keeps snake_case.
"""
