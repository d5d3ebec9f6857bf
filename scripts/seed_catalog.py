# ============================================================================
# Seed Demo Catalog
# ============================================================================
"""
Script to seed a small demo catalog: subjects, topics, questions and one
test series built from them.

Usage:
    python scripts/seed_catalog.py
"""

import asyncio
import sys
import os

# Ensure the package directory is in the python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from quizprep.core.database import async_session_maker, engine, Base
import quizprep.models  # noqa: F401  registers every table for create_all
from quizprep.models.curriculum import Subject, Topic, Question, TestSeries, TestSeriesQuestion
from sqlalchemy import select

CATALOG_DATA = [
    {
        "name": "Physics",
        "icon_name": "zap",
        "color_hex": "#3B82F6",
        "topics": [
            {
                "name": "Kinematics",
                "questions": [
                    {
                        "question_text": "A body starting from rest accelerates at 2 m/s² for 5 s. What distance does it cover?",
                        "options": ["10 m", "25 m", "50 m", "5 m"],
                        "correct_answer": "25 m",
                        "explanation": "s = ½at² = ½ × 2 × 25 = 25 m",
                        "difficulty": "easy",
                        "negative_marks": 0.33,
                    },
                    {
                        "question_text": "The slope of a velocity-time graph gives the",
                        "options": ["displacement", "acceleration", "speed", "jerk"],
                        "correct_answer": "acceleration",
                        "explanation": "Acceleration is the rate of change of velocity.",
                        "difficulty": "easy",
                        "negative_marks": 0.33,
                    },
                    {
                        "question_text": "A ball is thrown up at 20 m/s (g = 10 m/s²). Maximum height in metres?",
                        "question_type": "numerical",
                        "options": None,
                        "correct_answer": "20",
                        "explanation": "h = u²/2g = 400/20 = 20 m",
                        "difficulty": "medium",
                        "marks": 2,
                    },
                ],
            },
            {
                "name": "Laws of Motion",
                "questions": [
                    {
                        "question_text": "Newton's first law is also known as the law of",
                        "options": ["inertia", "momentum", "gravitation", "reaction"],
                        "correct_answer": "inertia",
                        "explanation": "A body stays at rest or in uniform motion unless acted on by a force.",
                        "difficulty": "easy",
                    },
                    {
                        "question_text": "A 2 kg mass accelerates at 3 m/s². The net force on it is",
                        "options": ["1.5 N", "5 N", "6 N", "9 N"],
                        "correct_answer": "6 N",
                        "explanation": "F = ma = 2 × 3 = 6 N",
                        "difficulty": "easy",
                        "negative_marks": 1,
                        "marks": 4,
                    },
                ],
            },
        ],
    },
    {
        "name": "Mathematics",
        "icon_name": "hash",
        "color_hex": "#10B981",
        "topics": [
            {
                "name": "Quadratic Equations",
                "questions": [
                    {
                        "question_text": "The roots of x² - 5x + 6 = 0 are",
                        "options": ["1 and 6", "2 and 3", "-2 and -3", "3 and 4"],
                        "correct_answer": "2 and 3",
                        "explanation": "(x - 2)(x - 3) = 0",
                        "difficulty": "easy",
                    },
                    {
                        "question_text": "The discriminant of 2x² + 3x + 5 = 0 is",
                        "question_type": "numerical",
                        "options": None,
                        "correct_answer": "-31",
                        "explanation": "b² - 4ac = 9 - 40 = -31",
                        "difficulty": "medium",
                    },
                ],
            },
        ],
    },
]

async def seed_catalog():
    """Seed the demo catalog"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_maker() as db:
        print("Starting catalog seeding...")
        series_questions = []

        for subject_order, subject_data in enumerate(CATALOG_DATA):
            result = await db.execute(
                select(Subject).where(Subject.name == subject_data["name"])
            )
            subject = result.scalar_one_or_none()

            if subject:
                print(f"  [SKIP] Subject '{subject.name}' exists.")
                continue

            subject = Subject(
                name=subject_data["name"],
                icon_name=subject_data["icon_name"],
                color_hex=subject_data["color_hex"],
                display_order=subject_order,
            )
            db.add(subject)
            await db.flush()  # Flush to get the ID
            print(f"  [CREATE] Subject '{subject.name}' created.")

            for topic_order, topic_data in enumerate(subject_data["topics"]):
                topic = Topic(
                    subject_id=subject.id,
                    name=topic_data["name"],
                    display_order=topic_order,
                )
                db.add(topic)
                await db.flush()

                for question_data in topic_data["questions"]:
                    question_data.setdefault("question_type", "mcq")
                    question_data.setdefault("marks", 1)
                    question_data.setdefault("negative_marks", 0)
                    question = Question(topic_id=topic.id, **question_data)
                    db.add(question)
                    series_questions.append(question)
                print(f"    + Added {len(topic_data['questions'])} questions to {topic.name}")

        if series_questions:
            await db.flush()
            series = TestSeries(
                title="Foundation Mock Test 1",
                description="Mixed questions across all demo topics",
                total_questions=len(series_questions),
                duration_minutes=15,
                total_marks=sum(q.marks for q in series_questions),
                difficulty="medium",
            )
            db.add(series)
            await db.flush()
            for order, question in enumerate(series_questions, start=1):
                db.add(TestSeriesQuestion(
                    test_series_id=series.id,
                    question_id=question.id,
                    question_order=order,
                ))
            print(f"  [CREATE] Test series '{series.title}' with {len(series_questions)} questions.")

        await db.commit()
        print("\nCatalog seeding completed successfully!")

if __name__ == "__main__":
    asyncio.run(seed_catalog())
