# PATH: apps/domains/assessments/management/commands/seed_assessments.py
"""
샘플 시험 채우기 (로컬 / 데모용)

- title 기준 update_or_create → 여러 번 실행해도 중복 생성 없음
- 문항 id 는 1부터 순번 부여

사용:
  python manage.py seed_assessments
  python manage.py seed_assessments --unpublished
"""
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from academy.domain.assessments.entities import AssessmentDefinition, Question
from apps.domains.assessments.models import Assessment


SAMPLE_ASSESSMENTS = [
    {
        "title": "Ethical Hacking Fundamentals Quiz",
        "description": "Test your understanding of ethical hacking concepts, methodology, and legal considerations.",
        "module_id": 1,
        "time_limit": 30,
        "passing_score": 70,
        "max_attempts": 3,
        "questions": [
            (
                "What is the primary goal of ethical hacking?",
                [
                    "To exploit vulnerabilities for personal gain",
                    "To identify and fix security vulnerabilities before malicious hackers can exploit them",
                    "To break into systems without permission",
                    "To develop new hacking tools",
                ],
                1,
            ),
            (
                "Which of the following is NOT a phase in the ethical hacking methodology?",
                ["Reconnaissance", "Scanning", "Exploitation", "Celebration"],
                3,
            ),
            (
                "What is the difference between black box, white box, and gray box testing?",
                [
                    "The color of the testing equipment used",
                    "The level of information provided to the tester about the target system",
                    "The severity of vulnerabilities being tested",
                    "The time of day when testing is performed",
                ],
                1,
            ),
            (
                "Which of the following is a legal requirement for ethical hacking?",
                [
                    "Using only open-source tools",
                    "Performing tests only during business hours",
                    "Obtaining proper written authorization",
                    "Publishing all findings publicly",
                ],
                2,
            ),
        ],
    },
    {
        "title": "OSINT and Reconnaissance Techniques Assessment",
        "description": "Test your knowledge of open-source intelligence gathering and reconnaissance techniques.",
        "module_id": 3,
        "time_limit": 25,
        "passing_score": 70,
        "max_attempts": 2,
        "questions": [
            (
                "Which of the following is NOT considered a passive reconnaissance technique?",
                [
                    "Reviewing a company's LinkedIn page",
                    "Analyzing WHOIS data",
                    "Port scanning the target network",
                    "Reading press releases",
                ],
                2,
            ),
            (
                "What is the primary purpose of DNS enumeration?",
                [
                    "To identify all domain names owned by a target organization",
                    "To map the internal network structure",
                    "To crack DNS authentication",
                    "To perform denial of service attacks",
                ],
                0,
            ),
            (
                "Which tool is specifically designed for email harvesting?",
                ["Nmap", "theHarvester", "Wireshark", "Metasploit"],
                1,
            ),
        ],
    },
]


class Command(BaseCommand):
    help = "Seed sample ethical hacking assessments (idempotent by title)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--unpublished",
            action="store_true",
            help="Create assessments as drafts (is_published=False)",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        publish = not options["unpublished"]

        for sample in SAMPLE_ASSESSMENTS:
            questions = [
                Question(id=i, prompt=text, options=tuple(opts), correct_answer=correct)
                for i, (text, opts, correct) in enumerate(sample["questions"], start=1)
            ]
            AssessmentDefinition(
                id=0,
                module_id=sample["module_id"],
                title=sample["title"],
                questions=tuple(questions),
                passing_score=sample["passing_score"],
                max_attempts=sample["max_attempts"],
            ).validate()

            obj, created = Assessment.objects.update_or_create(
                title=sample["title"],
                defaults={
                    "description": sample["description"],
                    "module_id": sample["module_id"],
                    "time_limit": sample["time_limit"],
                    "passing_score": sample["passing_score"],
                    "max_attempts": sample["max_attempts"],
                    "questions": [q.to_dict() for q in questions],
                    "is_published": publish,
                    "published_at": timezone.now() if publish else None,
                },
            )
            self.stdout.write(
                self.style.SUCCESS(
                    f"{'created' if created else 'updated'}: #{obj.id} {obj.title} ({len(questions)} questions)"
                )
            )
