from passlib.context import CryptContext
from .utils.config import BCRYPT_WORK_FACTOR

pwd = CryptContext(
    schemes=["bcrypt", "pbkdf2_sha256"],
    deprecated="auto",
    bcrypt__rounds=BCRYPT_WORK_FACTOR,
)

def hash_password(plain: str) -> str:
    return pwd.hash(plain)

def verify_password(plain: str, hashed: str) -> bool:
    # 雜湊格式壞掉也當作密碼錯誤
    try:
        return pwd.verify(plain, hashed)
    except ValueError:
        return False

def dummy_verify() -> None:
    # 帳號不存在時也花一次雜湊的時間
    pwd.dummy_verify()
