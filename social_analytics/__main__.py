from social_analytics.main import run

if __name__ == "__main__":
    run()
