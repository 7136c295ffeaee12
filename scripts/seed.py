#!/usr/bin/env python3
"""
Carga datos de ejemplo: un admin (contraseña aleatoria, se imprime una sola vez),
10 estudiantes y una encuesta con preguntas de estrellas y de texto.
Ejecutar desde la raíz del repo: python scripts/seed.py
Idempotente: no duplica usuarios por identificación ni la encuesta de ejemplo.
"""
import os
import secrets
import string
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from weekly_survey.core.security import hash_password
from weekly_survey.db.session import SessionLocal, init_db
from weekly_survey.models.survey import Question, Survey
from weekly_survey.models.user import ROLE_ADMIN, ROLE_STUDENT, User

ADMIN_ID_NUMBER = "ADMIN"
SAMPLE_TITLE = "Encuesta de satisfacción - semana 1"
STUDENT_NAMES = ["张三", "李四", "王五", "赵六", "钱七", "孙八", "周九", "吴十", "郑十一", "冯十二"]


def random_password(length: int = 12) -> str:
    alphabet = string.ascii_letters + string.digits + "!@#$%^&*"
    return "".join(secrets.choice(alphabet) for _ in range(length))


def main():
    init_db()
    db = SessionLocal()
    try:
        admin = db.query(User).filter(User.id_number == ADMIN_ID_NUMBER).first()
        if admin:
            print(f"[INFO] Admin ya existe (id={admin.id})")
        else:
            password = random_password()
            admin = User(name="ADMIN", id_number=ADMIN_ID_NUMBER, role=ROLE_ADMIN,
                         password_hash=hash_password(password))
            db.add(admin)
            print(f"[OK] Admin creado: identificación={ADMIN_ID_NUMBER} contraseña={password}")

        for i, name in enumerate(STUDENT_NAMES, start=1):
            id_number = f"202300{i}"
            if db.query(User.id).filter(User.id_number == id_number).first():
                continue
            db.add(User(name=name, id_number=id_number, role=ROLE_STUDENT))
            print(f"[OK] Estudiante {id_number} ({name})")

        if not db.query(Survey.id).filter(Survey.title == SAMPLE_TITLE).first():
            db.add(Survey(
                title=SAMPLE_TITLE,
                description="Nos ayuda a mejorar el curso semana a semana.",
                year=2025,
                semester=1,
                week=1,
                questions=[
                    Question(order_index=0, description="¿Qué tan satisfecho estás con las clases?",
                             config={"type": "star", "maxRating": 5}),
                    Question(order_index=1, description="¿Qué tan claro fue el material?",
                             config={"type": "star", "maxRating": 5}),
                    Question(order_index=2, description="¿Qué mejorarías?",
                             config={"type": "input", "multiline": True, "maxLength": 500}),
                ],
            ))
            print(f"[OK] Encuesta de ejemplo: {SAMPLE_TITLE}")

        db.commit()
        print("[INFO] Seed terminado")
    finally:
        db.close()


if __name__ == "__main__":
    main()
