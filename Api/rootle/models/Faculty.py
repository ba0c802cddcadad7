from sqlmodel import SQLModel


class Faculty(SQLModel):
    name: str
    departments: list[str]


# Offered to clients as suggestions. Uploads are not validated against it.
FACULTY_CATALOG = [
    Faculty(
        name="Faculty of Engineering",
        departments=["Civil Engineering", "Electrical Engineering", "Mechanical Engineering", "Computer Engineering"],
    ),
    Faculty(
        name="Faculty of Sciences",
        departments=["Computer Science", "Physics", "Chemistry", "Biology"],
    ),
    Faculty(
        name="Faculty of Social Sciences",
        departments=["Economics", "Political Science", "Sociology", "Psychology"],
    ),
    Faculty(
        name="Faculty of Arts",
        departments=["English Language", "History and International Studies", "Theatre Arts", "Linguistics"],
    ),
]
