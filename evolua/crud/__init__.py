from evolua.crud.state_records import crud_state_record

__all__ = [
    "crud_state_record",
]
