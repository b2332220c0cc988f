import asyncio
import os
import random
import sys
from collections import Counter
from datetime import date, timedelta

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app.core.db import SessionLocal, init_models
from app.core.errors import ConflictError
from app.modules.residents.schemas import ResidentCreate
from app.modules.residents.service import ResidentService
from app.modules.medical_records.schemas import MedicalRecordCreate
from app.modules.medical_records.service import MedicalRecordService

SURNAMES = {
    '田中': 'タナカ', '佐藤': 'サトウ', '鈴木': 'スズキ', '高橋': 'タカハシ', '渡辺': 'ワタナベ',
    '山本': 'ヤマモト', '中村': 'ナカムラ', '小林': 'コバヤシ', '加藤': 'カトウ', '吉田': 'ヨシダ',
    '山田': 'ヤマダ', '佐々木': 'ササキ', '山口': 'ヤマグチ', '松本': 'マツモト', '井上': 'イノウエ',
}
MALE_NAMES = {
    '太郎': 'タロウ', '一郎': 'イチロウ', '健一': 'ケンイチ', '明': 'アキラ', '博': 'ヒロシ',
    '誠': 'マコト', '学': 'マナブ', '正': 'タダシ', '勇': 'イサム', '次郎': 'ジロウ',
}
FEMALE_NAMES = {
    '花子': 'ハナコ', 'みどり': 'ミドリ', 'よしこ': 'ヨシコ', 'としこ': 'トシコ', 'かずこ': 'カズコ',
    'まさこ': 'マサコ', 'のりこ': 'ノリコ', 'ゆきこ': 'ユキコ', 'えみこ': 'エミコ', 'せつこ': 'セツコ',
}
MEDICATIONS = [
    'アリセプト', 'メマリー', 'リバスタッチ', 'レミニール', 'アムロジピン',
    'メトホルミン', 'アスピリン', 'ワーファリン', 'フロセミド', 'オメプラゾール',
    'ランソプラゾール', 'カルシウム', 'ビタミンD', 'マグネシウム',
]
HISTORIES = [
    '高血圧症', '糖尿病', '認知症', '心房細動', '脳梗塞', '骨粗鬆症', '白内障',
    '慢性腎臓病', '慢性心不全', 'COPD', '便秘症', '不眠症', 'パーキンソン病',
]
CARE_NOTES = [
    '歩行時見守り必要。転倒リスクあり。',
    '食事摂取良好。水分摂取促し必要。',
    '夜間不穏あり。睡眠パターン観察継続。',
    '排泄自立。定時誘導実施中。',
    '入浴拒否傾向。声かけ工夫必要。',
    '車椅子移乗時2人介助。',
    '薬の管理必要。服薬確認徹底。',
    '血圧変動あり。定期測定継続。',
    '食事形態：きざみ食。むせ込み注意。',
    '皮膚乾燥あり。保湿ケア実施。',
]

def random_day(start: date, end: date) -> date:
    return start + timedelta(days=random.randint(0, max((end - start).days, 0)))

def room_number() -> str:
    return f"{random.randint(1, 3)}0{random.randint(1, 20):02d}"

def build_resident(used_names: set) -> ResidentCreate | None:
    for _ in range(50):
        gender = '女性' if random.random() > 0.6 else '男性'
        surname = random.choice(list(SURNAMES))
        given_pool = MALE_NAMES if gender == '男性' else FEMALE_NAMES
        given = random.choice(list(given_pool))
        name = f"{surname} {given}"
        if name in used_names:
            continue
        used_names.add(name)
        birth_year = 1930 + random.randint(0, 39)
        admission = random_day(date(2020, 1, 1), date(2024, 12, 31))
        # 5% already discharged
        discharge = random_day(admission, date.today()) if random.random() < 0.05 else None
        return ResidentCreate(
            name=name,
            furigana=f"{SURNAMES[surname]} {given_pool[given]}",
            gender=gender,
            birth_date=random_day(date(birth_year, 1, 1), date(birth_year, 12, 31)),
            room_number=room_number(),
            admission_date=admission,
            discharge_date=discharge,
            medical_history='、'.join(random.sample(HISTORIES, random.randint(1, 4))),
            medications=random.sample(MEDICATIONS, random.randint(0, 5)),
            care_level=random.randint(1, 5),
        )
    return None

async def main(count: int = 100):
    """
    Seeds demo residents, each with one to five medical records.
    """
    print("Starting test data creation...")
    await init_models()

    created = []
    record_count = 0
    used_names: set = set()
    async with SessionLocal() as db:
        residents = ResidentService(db)
        records = MedicalRecordService(db)

        for _ in range(count):
            payload = build_resident(used_names)
            if payload is None:
                print("  - Ran out of unique names. Stopping.")
                break
            resident = await residents.create(payload)
            created.append(resident)

            for _ in range(random.randint(1, 5)):
                day = random_day(resident.admission_date, date.today())
                try:
                    await records.create(resident.id, MedicalRecordCreate(date=day, record=random.choice(CARE_NOTES)))
                    record_count += 1
                except ConflictError:
                    # one note per day; skip the collision
                    continue

    print("Test data creation complete!")
    print(f"   - residents: {len(created)}")
    print(f"   - medical records: {record_count}")
    if created:
        print(f"   - records per resident: {record_count / len(created):.1f}")
        genders = Counter(r.gender for r in created)
        print(f"   - gender: 男性 {genders['男性']}, 女性 {genders['女性']}")
        levels = Counter(r.care_level for r in created)
        print(f"   - care levels: {dict(sorted(levels.items()))}")

if __name__ == "__main__":
    asyncio.run(main(int(sys.argv[1]) if len(sys.argv) > 1 else 100))
