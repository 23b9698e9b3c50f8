import bcrypt

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


class PasswordManager:
    """One-way password hashing and verification."""
    
    def __init__(self, rounds: int = 12):
        self.rounds = rounds
    
    def hash_password(self, password: str) -> str:
        hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds))
        return hashed.decode("utf-8")
    
    def verify_password(self, password: str, hashed_password: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
        except ValueError:
            # Malformed hash or over-long password
            return False
    
    def needs_rehash(self, hashed_password: str) -> bool:
        """True when the stored hash was made with a different cost factor."""
        try:
            # Format: $2b$<cost>$<salt+hash>
            cost = int(hashed_password.split("$")[2])
        except (IndexError, ValueError):
            return True
        return cost != self.rounds
