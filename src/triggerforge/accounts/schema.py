"""Record store layouts for Account and its child Contact records."""

from triggerforge.persistence.store import EntitySchema, FieldSpec

ACCOUNT_SCHEMA = EntitySchema(
    name="Account",
    abbreviation="ACC",
    fields=[
        FieldSpec("id"),
        FieldSpec("name"),
        FieldSpec("type"),
        FieldSpec("phone"),
        FieldSpec("employeeCount", "INTEGER"),
        FieldSpec("description"),
        FieldSpec("createdAt"),
        FieldSpec("updatedAt"),
    ],
)

CONTACT_SCHEMA = EntitySchema(
    name="Contact",
    abbreviation="CON",
    fields=[
        FieldSpec("id"),
        FieldSpec("accountId"),
        FieldSpec("firstName"),
        FieldSpec("lastName"),
        FieldSpec("email"),
        FieldSpec("description"),
        FieldSpec("createdAt"),
        FieldSpec("updatedAt"),
    ],
)

SCHEMAS = (ACCOUNT_SCHEMA, CONTACT_SCHEMA)
