"""
Student Service - registration transaction and the student+guardian projection.

Registration flow (one transaction):
1. Find the guardian by email, or create it
2. Hash the student's password
3. Insert the student linked to that guardian
4. Commit, then re-read the joined projection
"""

import logging
from typing import Optional

from sqlalchemy import text
from sqlalchemy.orm import Session

from app.core.auth import hash_password
from app.db.postgres import Database
from app.db.query import ListQuery
from app.schemas.schemas import StudentSortField

logger = logging.getLogger(__name__)

STUDENT_SELECT = """
    SELECT s.id, s."firstName", s."lastName", s."middleName", s."admissioNo", s.form, s.section,
           s.address, s.bloodgroup, s.genotype, s.religion, s.tribe, s.gender, s.dob, s.phone,
           s."studentImg", s.email, s.guardian_id,
           g.name AS guardian_name, g.phone AS guardian_phone, g.status AS guardian_status,
           g.email AS guardian_email, g.img AS guardian_img
    FROM students s
    LEFT JOIN guardians g ON s.guardian_id = g.id
"""

# payload field -> column, for fields a student may change about themselves
STUDENT_UPDATE_COLUMNS = {
    "firstName": '"firstName"',
    "lastName": '"lastName"',
    "middleName": '"middleName"',
    "admissioNo": '"admissioNo"',
    "form": "form",
    "section": "section",
    "address": "address",
    "bloodgroup": "bloodgroup",
    "genotype": "genotype",
    "religion": "religion",
    "tribe": "tribe",
    "gender": "gender",
    "dob": "dob",
    "phone": "phone",
    "studentImg": '"studentImg"',
    "email": "email",
    "password": "password",
}

student_list_query = ListQuery(
    select_sql=STUDENT_SELECT,
    search_columns=[
        's."firstName"', 's."lastName"', 's."middleName"', 's."admissioNo"',
        "s.email", "s.form", "g.name",
    ],
    sort_columns={
        StudentSortField.id: "s.id",
        StudentSortField.firstName: 's."firstName"',
        StudentSortField.lastName: 's."lastName"',
        StudentSortField.admissioNo: 's."admissioNo"',
        StudentSortField.form: "s.form",
        StudentSortField.section: "s.section",
        StudentSortField.email: "s.email",
        StudentSortField.dob: "s.dob",
    },
    tiebreaker="s.id",
)


def find_or_create_guardian(session: Session, data: dict) -> int:
    """Reuse the guardian registered under this email, otherwise insert one."""
    result = session.execute(
        text("SELECT id FROM guardians WHERE email = :email"),
        {"email": data["guardianEmail"]}
    )
    row = result.fetchone()
    if row:
        logger.info("Reusing guardian %s for %s", row[0], data["guardianEmail"])
        return row[0]

    result = session.execute(
        text("""
            INSERT INTO guardians (name, phone, status, email, img)
            VALUES (:name, :phone, :status, :email, :img)
            RETURNING id
        """),
        {
            "name": data["guardianName"],
            "phone": data["guardianPhone"],
            "status": data["guardianStatus"],
            "email": data["guardianEmail"],
            "img": data.get("guardianImg"),
        }
    )
    return result.scalar_one()


def register_student(db: Database, data: dict) -> dict:
    """
    Create the guardian (or reuse it) and the student atomically.

    `data` is a JSON-mode dump of RegistrationRequest. Any error rolls the
    whole transaction back, guardian insert included, and is re-raised.
    """
    with db.session() as session:
        guardian_id = find_or_create_guardian(session, data)

        result = session.execute(
            text("""
                INSERT INTO students (
                    "firstName", "lastName", "middleName", "admissioNo", form, section,
                    address, bloodgroup, genotype, religion, tribe, gender,
                    dob, phone, "studentImg", email, password, guardian_id
                ) VALUES (
                    :firstName, :lastName, :middleName, :admissioNo, :form, :section,
                    :address, :bloodgroup, :genotype, :religion, :tribe, :gender,
                    :dob, :phone, :studentImg, :email, :password, :guardian_id
                )
                RETURNING id
            """),
            {
                "firstName": data["firstName"],
                "lastName": data["lastName"],
                "middleName": data.get("middleName"),
                "admissioNo": data["admissioNo"],
                "form": data["form"],
                "section": data["section"],
                "address": data["address"],
                "bloodgroup": data["bloodgroup"],
                "genotype": data["genotype"],
                "religion": data["religion"],
                "tribe": data["tribe"],
                "gender": data["gender"],
                "dob": data["dob"],
                "phone": data["phone"],
                "studentImg": data.get("studentImg"),
                "email": data["email"],
                "password": hash_password(data["password"]),
                "guardian_id": guardian_id,
            }
        )
        student_id = result.scalar_one()

    logger.info("Registered student %s with guardian %s", student_id, guardian_id)
    return get_student(db, student_id)


def get_student(db: Database, student_id: int) -> Optional[dict]:
    """Student joined with its guardian, or None."""
    return db.fetch_one(f"{STUDENT_SELECT} WHERE s.id = :id", {"id": student_id})


def find_login(db: Database, email: str) -> Optional[dict]:
    """Columns needed to check a login attempt."""
    return db.fetch_one(
        'SELECT id, email, password, "firstName" FROM students WHERE email = :email',
        {"email": email}
    )
