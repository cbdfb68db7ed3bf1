import datetime

import pydantic as p


class BaseModel(p.BaseModel):
    # dumps use field aliases unless told otherwise
    model_config = p.ConfigDict(serialize_by_alias=True)


class WithCtime(BaseModel):
    create_time: datetime.datetime
