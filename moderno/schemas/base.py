from pydantic import BaseModel
from pydantic.alias_generators import to_camel


# Request and response bodies use camelCase keys (clientId, totalSpending)
# while the models keep snake_case attributes.
class CamelModel(BaseModel):

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
        use_enum_values = True
