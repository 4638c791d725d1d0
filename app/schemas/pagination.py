from pydantic import BaseModel


class ListMeta(BaseModel):
    total: int
    count: int
    per_page: int
    current_page: int
    total_pages: int
    filter: str
    sort_by: str
    sort_order: str
