from models import User


def test_seed_users_creates_random_users(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=['seed-users', '-n', '3'])
    assert 'Created 3 random users' in result.output
    users = User.query.all()
    assert len(users) == 3
    assert all(u.qr_code_url.startswith('data:image/png;base64,') for u in users)


def test_init_db(app):
    result = app.test_cli_runner().invoke(args=['init-db'])
    assert 'Initialized the database.' in result.output


def test_backup_db(app, make_user, tmp_path):
    make_user()
    target = tmp_path / 'backups' / 'copy.db'
    result = app.test_cli_runner().invoke(args=['backup-db', '-o', str(target)])
    assert 'Backup created successfully' in result.output
    assert target.exists()
