"""Reference data: MU >-< Country -< CT -< Project -< Company."""
import logging
from sqlalchemy import select, insert
from tssr_shared.errors import DuplicateError, ForeignKeyError, NotFoundError
from tssr_shared.validation import Validator
from ..models import db, MU, Country, CT, Project, Company, mu_countries

logger = logging.getLogger('hierarchy')


class Level:
    """One 1:N level below Country."""

    def __init__(self, model, label, parent_model, parent_field, parent_label, code_suffix):
        self.model = model
        self.label = label
        self.parent_model = parent_model
        self.parent_field = parent_field
        self.parent_label = parent_label
        self.code_suffix = code_suffix

    def default_code(self, name):
        return f"{name[:6].upper()}{self.code_suffix}"


LEVELS = {
    'cts': Level(CT, 'CT', Country, 'country_id', 'Country', '_CT'),
    'projects': Level(Project, 'Project', CT, 'ct_id', 'CT', '_PROJ'),
    'companies': Level(Company, 'Company', Project, 'project_id', 'Project', '_COMP'),
}


def serialize(entry, parent_field=None):
    data = {'id': entry.id, 'name': entry.name, 'code': entry.code}
    if parent_field:
        data[parent_field] = getattr(entry, parent_field)
    data['created_at'] = entry.created_at.isoformat() if entry.created_at else None
    data['updated_at'] = entry.updated_at.isoformat() if entry.updated_at else None
    return data


def list_mus():
    return [serialize(mu) for mu in MU.query.order_by(MU.name).all()]


def create_mu(data):
    validated = Validator.validate_hierarchy_data(data, 'MU')
    name = validated['name']
    code = validated.get('code') or name.upper()[:50]

    if MU.query.filter((MU.name == name) | (MU.code == code)).first():
        raise DuplicateError(f"MU '{name}' already exists")

    mu = MU(name=name, code=code)
    db.session.add(mu)
    db.session.commit()
    logger.info(f"Created MU: {mu.id} - {mu.name}")
    return serialize(mu)


def is_linked(mu_id, country_id):
    return db.session.execute(
        select(mu_countries.c.mu_id).where(
            mu_countries.c.mu_id == mu_id, mu_countries.c.country_id == country_id
        )
    ).first() is not None


def list_countries(mu_id=None):
    """All countries, or only those linked to ``mu_id`` through mu_countries."""
    query = select(Country).order_by(Country.name)
    if mu_id is not None:
        query = query.join(mu_countries, mu_countries.c.country_id == Country.id).where(
            mu_countries.c.mu_id == mu_id
        )
    return [serialize(country) for country in db.session.execute(query).scalars().all()]


def create_country(data):
    """Create a country and link it to an MU, or link an existing country.

    Returns:
        tuple: (serialized country, created flag)
    """
    validated = Validator.validate_hierarchy_data(data, 'Country', 'mu_id')
    name = validated['name']
    mu_id = validated['mu_id']

    if db.session.get(MU, mu_id) is None:
        raise ForeignKeyError(f"MU with id {mu_id} not found")

    country = Country.query.filter_by(name=name).first()
    created = country is None
    if created:
        code = validated.get('code') or name[:2].upper()
        if Country.query.filter_by(code=code).first():
            raise DuplicateError(f"Country code '{code}' is already used")
        country = Country(name=name, code=code)
        db.session.add(country)
        db.session.flush()
    elif is_linked(mu_id, country.id):
        raise DuplicateError("Country already exists for this MU")

    db.session.execute(insert(mu_countries).values(mu_id=mu_id, country_id=country.id))
    db.session.commit()
    logger.info(f"{'Created' if created else 'Linked'} country {country.id} - {country.name} for MU {mu_id}")
    return serialize(country), created


def list_children(level_key, parent_id=None):
    """Entries of one level, all of them or only those under ``parent_id``."""
    level = LEVELS[level_key]
    query = level.model.query
    if parent_id is not None:
        query = query.filter(getattr(level.model, level.parent_field) == parent_id)
    return [serialize(entry, level.parent_field) for entry in query.order_by(level.model.name).all()]


def create_child(level_key, data):
    """Create a CT, project or company under an existing parent."""
    level = LEVELS[level_key]
    validated = Validator.validate_hierarchy_data(data, level.label, level.parent_field)
    name = validated['name']
    parent_id = validated[level.parent_field]
    code = validated.get('code') or level.default_code(name)

    if db.session.get(level.parent_model, parent_id) is None:
        raise ForeignKeyError(f"{level.parent_label} with id {parent_id} not found")

    parent_column = getattr(level.model, level.parent_field)
    existing = level.model.query.filter(
        parent_column == parent_id, (level.model.name == name) | (level.model.code == code)
    ).first()
    if existing:
        raise DuplicateError(f"{level.label} already exists for this {level.parent_label}")

    entry = level.model(name=name, code=code, **{level.parent_field: parent_id})
    db.session.add(entry)
    db.session.commit()
    logger.info(f"Created {level.label}: {entry.id} - {entry.name}")
    return serialize(entry, level.parent_field)


def get_path(mu_id, country_id, ct_id, project_id):
    """Nested MU > Country > CT > Project path with the project's companies.

    Raises:
        NotFoundError: If any level is missing or not linked to its parent
    """
    mu = db.session.get(MU, mu_id)
    country = db.session.get(Country, country_id)
    ct = db.session.get(CT, ct_id)
    project = db.session.get(Project, project_id)

    if (mu is None or country is None or ct is None or project is None
            or not is_linked(mu_id, country_id)
            or ct.country_id != country.id or project.ct_id != ct.id):
        raise NotFoundError("Hierarchy path not found")

    companies = Company.query.filter_by(project_id=project.id).order_by(Company.name).all()
    project_data = serialize(project, 'ct_id')
    project_data['companies'] = [serialize(company, 'project_id') for company in companies]
    ct_data = serialize(ct, 'country_id')
    ct_data['projects'] = [project_data]
    country_data = serialize(country)
    country_data['cts'] = [ct_data]
    mu_data = serialize(mu)
    mu_data['countries'] = [country_data]
    return mu_data


def unique_code(model, base, **scope):
    """``base`` or ``base_2``, ``base_3``... not yet used within ``scope``."""
    base = base[:46]
    code = base
    suffix = 2
    while model.query.filter_by(code=code, **scope).first():
        code = f"{base}_{suffix}"
        suffix += 1
    return code


def slug_code(name):
    return '_'.join(name.upper().replace('&', ' ').replace(',', ' ').split())


def seed_hierarchy(rows):
    """Idempotently load flat ``{mu, mu_code, country, country_code, ct, project, company}`` rows.

    Entries are matched by name within their parent, so running twice
    creates nothing new.

    Returns:
        dict: Created counts per level
    """
    created = {'mus': 0, 'countries': 0, 'links': 0, 'cts': 0, 'projects': 0, 'companies': 0}

    for row in rows:
        mu_name = row['mu'].strip()
        mu = MU.query.filter_by(name=mu_name).first()
        if mu is None:
            mu = MU(name=mu_name, code=unique_code(MU, row.get('mu_code') or mu_name.upper()))
            db.session.add(mu)
            db.session.flush()
            created['mus'] += 1

        country_name = row['country'].strip()
        country = Country.query.filter_by(name=country_name).first()
        if country is None:
            base = row.get('country_code') or country_name[:2].upper()
            country = Country(name=country_name, code=unique_code(Country, base))
            db.session.add(country)
            db.session.flush()
            created['countries'] += 1
        if not is_linked(mu.id, country.id):
            db.session.execute(insert(mu_countries).values(mu_id=mu.id, country_id=country.id))
            created['links'] += 1

        parent = country
        for level_key, field in (('cts', 'ct'), ('projects', 'project'), ('companies', 'company')):
            level = LEVELS[level_key]
            name = (row.get(field) or '').strip()
            if not name:
                break
            scope = {level.parent_field: parent.id}
            entry = level.model.query.filter_by(name=name, **scope).first()
            if entry is None:
                entry = level.model(name=name, code=unique_code(level.model, slug_code(name), **scope), **scope)
                db.session.add(entry)
                db.session.flush()
                created[level_key] += 1
            parent = entry

    db.session.commit()
    logger.info(f"Hierarchy seed completed: {created}")
    return created
