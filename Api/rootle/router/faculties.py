from fastapi import APIRouter
from rootle.models.Faculty import Faculty, FACULTY_CATALOG

router = APIRouter()


@router.get("/faculties")
async def get_faculties() -> list[Faculty]:
    return FACULTY_CATALOG
