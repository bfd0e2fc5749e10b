# src/plikeme/scripts/seed.py
"""
Populate the configured database with demo data.

Creates the disease communities, numbered demo users (``user001`` with
password ``Pass001!`` and so on), random memberships, threads and nested
replies, and promotes a few users to gurus. For a given ``--seed`` the data
is identical apart from timestamps, which are offsets back from the time
of the run. Pass ``now`` to ``seed()`` to pin them as well.
"""

from __future__ import annotations

import argparse
import datetime
import logging
import random
import sys

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from plikeme.core.security import hash_password
from plikeme.db.session import SessionLocal, create_tables
from plikeme.db.time import utcnow
from plikeme.models import (
    Community,
    GuruQuestion,
    GuruQuestionReply,
    Reply,
    SubCommunityMember,
    Thread,
    ThreadCommunity,
    User,
    UserCommunity,
    UserDiseaseTag,
    UserHospital,
)
from plikeme.services.membership import join_community

logger = logging.getLogger("plikeme.seed")

COMMUNITIES: list[tuple[str, str, str]] = [
    ("糖尿病", "分享血糖管理经验，交流饮食和运动心得，互相鼓励共同面对糖尿病。", "糖尿病 血糖 胰岛素 糖尿"),
    ("高血压", "讨论血压控制方法，分享健康生活方式，一起守护心血管健康。", "高血压 血压 心血管 心脏"),
    ("抑郁症", "在这里你不孤单。分享心路历程，获得理解与支持，一起走向阳光。", "抑郁症 抑郁 心理 情绪 焦虑 心理健康"),
    ("乳腺癌", "抗癌路上，我们同行。分享治疗经验，传递希望与力量。", "乳腺癌 乳腺 癌症 肿瘤 化疗"),
    ("关节炎", "交流关节养护知识，分享缓解疼痛的方法，提高生活质量。", "关节炎 关节 风湿 类风湿 骨骼"),
    ("失眠症", "分享改善睡眠的方法，交流助眠技巧，一起找回安稳的夜晚。", "失眠症 失眠 睡眠 睡不着 入睡困难"),
    ("焦虑症", "分享应对焦虑的方法，交流放松技巧，互相支持共同面对焦虑。", "焦虑症 焦虑 紧张 恐慌 心理"),
    ("帕金森病", "交流帕金森病的治疗经验，分享日常护理技巧，互相鼓励。", "帕金森 帕金森病 震颤 神经"),
    ("多发性硬化", "分享MS治疗经验，交流康复方法，一起面对挑战。", "多发性硬化 MS 神经系统 自身免疫"),
    ("类风湿关节炎", "交流类风湿治疗经验，分享缓解疼痛的方法，互相支持。", "类风湿 类风湿关节炎 关节 免疫"),
    ("纤维肌痛", "分享纤维肌痛的应对策略，交流缓解疼痛的经验。", "纤维肌痛 慢性疼痛 肌肉痛 疲劳"),
    ("克罗恩病", "交流克罗恩病的治疗经验，分享饮食建议，互相鼓励。", "克罗恩病 肠炎 消化道 炎症性肠病"),
    ("肺癌", "分享肺癌治疗经验，传递希望与力量，一起抗癌。", "肺癌 肺 癌症 肿瘤 化疗 放疗"),
    ("阿尔茨海默病", "为阿尔茨海默病患者及家属提供支持，分享护理经验。", "阿尔茨海默 老年痴呆 记忆 认知障碍"),
    ("甲状腺疾病", "交流甲状腺问题的治疗经验，分享健康管理方法。", "甲状腺 甲亢 甲减 甲状腺结节"),
    ("慢性疲劳综合征", "分享应对慢性疲劳的方法，交流恢复精力的技巧。", "慢性疲劳 疲劳综合征 CFS 疲惫"),
    ("偏头痛", "交流偏头痛的治疗方法，分享预防和缓解技巧。", "偏头痛 头痛 头疼 神经"),
    ("哮喘", "分享哮喘管理经验，交流用药和生活方式建议。", "哮喘 呼吸 气喘 过敏 肺"),
    ("银屑病", "交流银屑病的治疗经验，分享皮肤护理方法。", "银屑病 牛皮癣 皮肤 皮肤病"),
    ("癫痫", "分享癫痫控制经验，交流用药和生活建议，互相支持。", "癫痫 抽搐 神经 发作"),
    ("心脏病", "交流心脏病的预防和治疗经验，分享健康生活方式。", "心脏病 心脏 冠心病 心血管 心肌梗死"),
    ("肝病", "分享肝病治疗经验，交流保肝护肝的方法。", "肝病 肝炎 肝硬化 脂肪肝 乙肝"),
    ("肾病", "交流肾病治疗经验，分享饮食和生活管理建议。", "肾病 肾脏 肾炎 透析 尿毒症"),
    ("强直性脊柱炎", "分享强直性脊柱炎的治疗经验，交流康复方法。", "强直性脊柱炎 脊柱 背痛 关节"),
    ("双相情感障碍", "分享双相情感障碍的管理经验，互相理解与支持。", "双相 双相情感障碍 躁郁症 情绪 心理"),
    ("自闭症", "为自闭症患者及家属提供支持，分享成长经验。", "自闭症 自闭 ASD 发育障碍"),
    ("ADHD多动症", "交流ADHD的管理方法，分享应对策略和技巧。", "ADHD 多动症 注意力缺陷 专注"),
    ("痛风", "分享痛风的预防和治疗经验，交流饮食建议。", "痛风 尿酸 关节痛 痛风石"),
    ("骨质疏松", "交流骨质疏松的预防和治疗，分享补钙经验。", "骨质疏松 骨骼 骨折 钙 骨密度"),
    ("慢性肾病", "分享慢性肾病的管理经验，交流饮食和治疗建议。", "慢性肾病 肾功能 透析 肾脏"),
]

DIMENSIONS: dict[str, dict[str, dict[str, object]]] = {
    "糖尿病": {
        "stage": {"label": "阶段", "values": ["糖尿病前期", "新确诊", "稳定期", "并发症期"]},
        "type": {"label": "类型", "values": ["1型", "2型", "妊娠期"]},
    },
    "乳腺癌": {
        "stage": {"label": "分期", "values": ["0期", "I期", "II期", "III期", "IV期"]},
        "type": {"label": "分型", "values": ["HR阳性", "HER2阳性", "三阴性"]},
    },
    "肺癌": {
        "stage": {"label": "分期", "values": ["早期", "局部晚期", "晚期"]},
        "type": {"label": "类型", "values": ["非小细胞肺癌", "小细胞肺癌"]},
    },
    "抑郁症": {
        "stage": {"label": "阶段", "values": ["急性期", "巩固期", "维持期"]},
    },
    "慢性肾病": {
        "stage": {"label": "分期", "values": ["1期", "2期", "3期", "4期", "5期"]},
    },
}

THREAD_TITLES = [
    "我的治疗经历分享",
    "今天感觉好多了",
    "寻求大家的建议",
    "一些心得体会",
    "坚持就是胜利",
    "感谢大家的支持",
    "新的一天，新的开始",
    "分享一个小技巧",
    "我的康复之路",
    "希望能帮到大家",
    "最近的一些变化",
    "终于找到了适合的方法",
    "给新病友的建议",
    "复诊归来，情况不错",
    "日常管理小窍门",
]

THREAD_CONTENTS = [
    "最近尝试了一些新的方法，感觉效果还不错，想和大家分享一下。",
    "经过一段时间的调整，现在状态比之前好了很多。希望大家也能坚持下去！",
    "有没有朋友遇到过类似的情况？想听听大家的经验和建议。",
    "今天想记录一下自己的心路历程，希望对正在经历同样事情的朋友有所帮助。",
    "感谢社区里每一位给我鼓励和支持的朋友，让我感到不再孤单。",
    "每天进步一点点，积累下来就是很大的改变。",
    "刚从医院回来，医生说恢复得不错，继续保持就好。",
    "今天整理了一下自己的用药记录和生活日志，发现规律作息真的很重要。",
]

REPLIES = [
    "谢谢分享，对我很有帮助！",
    "我也有类似的经历，深有同感。",
    "加油！我们一起坚持！",
    "请问具体是怎么做的呢？能详细说说吗？",
    "你说得对，心态真的很重要。",
    "希望你越来越好！",
    "请问你是在哪家医院看的？",
    "支持你！我们都会好起来的。",
    "学习了，感谢分享！",
    "希望我们都能早日康复！",
]

REPLIES_TO_REPLIES = [
    "对的，我也觉得是这样。",
    "谢谢你的回复！",
    "嗯嗯，同意你说的。",
    "谢谢你的建议！",
    "好的，我会注意的。",
    "明白了，谢谢解答！",
]

GURU_INTROS = [
    "病龄十年，乐于分享日常管理经验。",
    "曾是护士，现在专注于病友互助。",
    "康复五年，欢迎提问交流。",
]

HOSPITALS = ["北京协和医院", "华西医院", "瑞金医院", "中山大学附属第一医院", "湘雅医院"]
GENDERS = ["男", "女"]
CITIES = ["北京", "上海", "成都", "广州", "长沙", "杭州"]

MIN_THREAD_DAYS = 0
MAX_THREAD_DAYS = 30
MIN_REPLY_DAYS = 5


def _demo_credentials(index: int) -> tuple[str, str]:
    number = f"{index:03d}"
    return f"user{number}", f"Pass{number}!"


def _days_ago(
    rng: random.Random, now: datetime.datetime, low: int, high: int
) -> datetime.datetime:
    return now - datetime.timedelta(days=rng.randint(low, high), hours=rng.randint(0, 23))


def clear_data(db: Session) -> None:
    """Remove every row the seed script creates."""
    for model in (
        GuruQuestionReply,
        GuruQuestion,
        Reply,
        ThreadCommunity,
        Thread,
        UserCommunity,
        UserDiseaseTag,
        UserHospital,
        SubCommunityMember,
        User,
        Community,
    ):
        db.execute(delete(model))
    db.commit()
    logger.info("cleared existing data")


def seed_communities(db: Session) -> list[Community]:
    communities = [
        Community(
            name=name,
            description=description,
            keywords=keywords,
            dimensions=DIMENSIONS.get(name),
        )
        for name, description, keywords in COMMUNITIES
    ]
    db.add_all(communities)
    db.commit()
    logger.info("created %s communities", len(communities))
    return communities


def seed_users(db: Session, rng: random.Random, count: int) -> list[User]:
    users = []
    for index in range(1, count + 1):
        username, password = _demo_credentials(index)
        users.append(
            User(
                username=username,
                password_hash=hash_password(password),
                age=rng.randint(18, 80),
                gender=rng.choice(GENDERS),
                location_living=rng.choice(CITIES),
            )
        )
    db.add_all(users)
    db.commit()
    logger.info("created %s users", count)
    return users


def seed_memberships(
    db: Session, rng: random.Random, users: list[User], communities: list[Community]
) -> dict[int, list[Community]]:
    """Join each user to 1-5 random communities, sometimes at a deeper level."""
    joined: dict[int, list[Community]] = {}
    for user in users:
        picks = rng.sample(communities, k=min(len(communities), rng.randint(1, 5)))
        joined[user.id] = picks
        for community in picks:
            stages = community.dimension_values("stage")
            types = community.dimension_values("type")
            stage = rng.choice(stages) if stages and rng.random() < 0.5 else None
            type_ = rng.choice(types) if types and rng.random() < 0.5 else None
            join_community(db, user.id, community, stage, type_)
            user.disease_tags.append(UserDiseaseTag(tag=community.name))
        if rng.random() < 0.3:
            user.hospitals.append(UserHospital(hospital=rng.choice(HOSPITALS)))
    db.commit()
    total = db.scalar(select(func.count()).select_from(UserCommunity))
    logger.info("created %s membership rows", total)
    return joined


def seed_threads(
    db: Session,
    rng: random.Random,
    joined: dict[int, list[Community]],
    now: datetime.datetime,
) -> list[Thread]:
    """Each user writes 0-3 threads linked to 1-3 of their communities."""
    threads = []
    for user_id, communities in joined.items():
        for _ in range(rng.randint(0, 3)):
            thread = Thread(
                user_id=user_id,
                title=rng.choice(THREAD_TITLES),
                content=rng.choice(THREAD_CONTENTS),
                created_at=_days_ago(rng, now, MIN_THREAD_DAYS, MAX_THREAD_DAYS),
            )
            linked = rng.sample(communities, k=rng.randint(1, min(3, len(communities))))
            thread.community_links.extend(
                ThreadCommunity(community_id=community.id) for community in linked
            )
            threads.append(thread)
    db.add_all(threads)
    db.commit()
    logger.info("created %s threads", len(threads))
    return threads


def seed_replies(
    db: Session,
    rng: random.Random,
    threads: list[Thread],
    users: list[User],
    now: datetime.datetime,
) -> tuple[int, int]:
    """Give threads top-level replies, half of which grow a reply chain.

    Returns:
        ``(top_level, stacked)`` reply counts.
    """
    user_ids = [user.id for user in users]
    top_level = stacked = 0
    for thread in threads:
        repliers = [uid for uid in user_ids if uid != thread.user_id]
        if not repliers:
            continue
        for _ in range(rng.randint(0, 6)):
            at = _days_ago(rng, now, MIN_REPLY_DAYS, MAX_THREAD_DAYS)
            parent = Reply(
                thread_id=thread.id,
                user_id=rng.choice(repliers),
                content=rng.choice(REPLIES),
                created_at=at,
            )
            db.add(parent)
            db.flush()
            top_level += 1
            if rng.random() < 0.5:
                continue
            for _ in range(rng.randint(1, 3)):
                candidates = [uid for uid in repliers + [thread.user_id] if uid != parent.user_id]
                at = at + datetime.timedelta(hours=rng.randint(1, 47))
                parent = Reply(
                    thread_id=thread.id,
                    user_id=rng.choice(candidates),
                    parent_reply_id=parent.id,
                    content=rng.choice(REPLIES_TO_REPLIES),
                    created_at=at,
                )
                db.add(parent)
                db.flush()
                stacked += 1
    db.commit()
    logger.info(
        "created %s replies (%s top-level, %s stacked)", top_level + stacked, top_level, stacked
    )
    return top_level, stacked


def seed_gurus(db: Session, rng: random.Random, users: list[User], count: int = 3) -> list[User]:
    gurus = rng.sample(users, k=min(count, len(users)))
    for guru, intro in zip(gurus, GURU_INTROS):
        guru.is_guru = True
        guru.guru_intro = intro
    db.commit()
    logger.info("promoted %s gurus: %s", len(gurus), ", ".join(g.username for g in gurus))
    return gurus


def seed(
    db: Session,
    *,
    users: int,
    seed_value: int | None,
    reset: bool,
    now: datetime.datetime | None = None,
) -> None:
    """Fill the database with demo data.

    Raises:
        RuntimeError: If communities already exist and ``reset`` is False.
    """
    rng = random.Random(seed_value)
    now = now or utcnow()
    if reset:
        clear_data(db)
    elif db.scalar(select(func.count()).select_from(Community)):
        raise RuntimeError("database already contains communities; rerun with --reset")

    communities = seed_communities(db)
    created_users = seed_users(db, rng, users)
    joined = seed_memberships(db, rng, created_users, communities)
    threads = seed_threads(db, rng, joined, now)
    seed_replies(db, rng, threads, created_users, now)
    seed_gurus(db, rng, created_users)

    if created_users:
        username, password = _demo_credentials(1)
        logger.info("demo login: %s / %s", username, password)


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the configured database with demo data")
    parser.add_argument("--users", type=int, default=100, help="Number of demo users to create.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for repeatable data.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Delete existing data before seeding.",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="[seed] %(message)s")
    if args.users < 0:
        parser.error("--users must be zero or positive")

    create_tables()
    db = SessionLocal()
    try:
        seed(db, users=args.users, seed_value=args.seed, reset=args.reset)
    except (RuntimeError, SQLAlchemyError) as exc:
        db.rollback()
        logger.error("seeding failed: %s", exc)
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
