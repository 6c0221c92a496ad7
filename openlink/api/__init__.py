def register_blueprints(app):
    from openlink.api.admin import bp as admin_bp
    from openlink.api.links import bp as links_bp
    from openlink.api.profile import bp as profile_bp
    from openlink.api.onboarding import bp as onboarding_bp
    from openlink.api.analytics import bp as analytics_bp
    from openlink.api.public import bp as public_bp
    from openlink.api.click import bp as click_bp

    app.register_blueprint(admin_bp)
    app.register_blueprint(links_bp)
    app.register_blueprint(profile_bp)
    app.register_blueprint(onboarding_bp)
    app.register_blueprint(analytics_bp)
    app.register_blueprint(public_bp)
    app.register_blueprint(click_bp)
